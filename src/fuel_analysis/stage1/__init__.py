"""
Stage 1: Loading and Exploration

Reads the raw fuel consumption CSV and produces factual summaries:
structure, descriptive statistics, missing values and duplicates.
"""

from .loader import load_fuel_data
from .explorer import Explorer

__all__ = ['load_fuel_data', 'Explorer']
