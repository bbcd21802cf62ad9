"""
Stage 2: Feature Preparation

Encodes categorical columns, z-score scales numeric predictors and
partitions rows into train and test sets.
"""

from .features import FeatureTransformer
from .splitter import Splitter, SplitResult

__all__ = ['FeatureTransformer', 'Splitter', 'SplitResult']
