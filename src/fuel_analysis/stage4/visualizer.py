"""
Visualization Module

Creates the exploratory and diagnostic plots:
- Distribution of CO2 emissions
- Correlation matrix of numeric columns
- CO2 emissions by vehicle class
- Regression diagnostics (residuals vs fitted, Q-Q, scale-location, residuals vs index)
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from pathlib import Path
from scipy import stats
from statsmodels.nonparametric.smoothers_lowess import lowess
from typing import Dict, Any, Optional, Tuple

from ..constants import GROUP_COLUMN, TARGET_COLUMN
from ..exceptions import PlotWriteError
from ..stage3.models import FittedModel
from ..utils.file_utils import ensure_dir
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

sns.set_style("whitegrid")


class Visualizer:
    """
    Renders plots to PNG files of fixed pixel size.

    Example:
        >>> viz = Visualizer(output_dir="plots")
        >>> viz.plot_co2_histogram(df)
        >>> viz.plot_diagnostics(model, "diagnostic_plots.png")
    """

    def __init__(
        self,
        output_dir: str = "plots",
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the Visualizer.

        Args:
            output_dir: Directory to save plots (created if missing)
            config: Configuration dictionary (dpi, histogram_bins, sizes in pixels)

        Raises:
            PlotWriteError: If the output directory cannot be created
        """
        self.output_dir = Path(output_dir)

        self.config = {
            'dpi': 100,
            'histogram_bins': 30,
            'histogram_size': (480, 480),
            'correlation_size': (800, 800),
            'boxplot_size': (1000, 600),
            'diagnostics_size': (1000, 1000)
        }

        if config:
            self.config.update(config)

        try:
            ensure_dir(self.output_dir)
        except OSError as e:
            raise PlotWriteError(f"Cannot create plot directory {self.output_dir}: {e}") from e

        logger.info(f"Initialized Visualizer (output: {self.output_dir})")

    def _figsize(self, size_px: Tuple[int, int]) -> Tuple[float, float]:
        width, height = size_px
        return width / self.config['dpi'], height / self.config['dpi']

    def _save(self, fig, file_name: str) -> Path:
        """Write a figure and close it, whether or not the write succeeds."""
        file_path = self.output_dir / file_name
        try:
            fig.savefig(file_path, dpi=self.config['dpi'])
        except OSError as e:
            raise PlotWriteError(f"Cannot write plot {file_path}: {e}") from e
        finally:
            plt.close(fig)

        logger.info(f"Saved plot: {file_path.name}")
        return file_path

    def plot_co2_histogram(self, df: pd.DataFrame, file_name: str = "co2_emissions_hist.png") -> Path:
        """
        Histogram of CO2 emissions.

        Args:
            df: Raw dataset
            file_name: Output file name

        Returns:
            Path to saved plot
        """
        fig, ax = plt.subplots(figsize=self._figsize(self.config['histogram_size']))

        sns.histplot(
            x=df[TARGET_COLUMN].dropna(),
            bins=self.config['histogram_bins'],
            color='blue',
            alpha=0.7,
            ax=ax
        )

        ax.set_title('Distribution of CO2 Emissions', fontsize=12, fontweight='bold')
        ax.set_xlabel('CO2 Emissions')
        ax.set_ylabel('Frequency')

        fig.tight_layout()

        return self._save(fig, file_name)

    def plot_correlation_matrix(
        self,
        df: pd.DataFrame,
        file_name: str = "correlation_matrix.png"
    ) -> Path:
        """
        Upper-triangular Pearson correlation heatmap of all numeric columns.

        Args:
            df: Raw dataset
            file_name: Output file name

        Returns:
            Path to saved plot
        """
        corr = correlation_matrix(df)

        # Hide the strict lower triangle, keep the diagonal
        mask = np.tril(np.ones(corr.shape, dtype=bool), k=-1)

        fig, ax = plt.subplots(figsize=self._figsize(self.config['correlation_size']))

        sns.heatmap(
            corr,
            mask=mask,
            cmap='RdBu_r',
            vmin=-1,
            vmax=1,
            square=True,
            linewidths=0.5,
            cbar_kws={'shrink': 0.8},
            ax=ax
        )

        plt.setp(ax.get_xticklabels(), rotation=45, ha='right', color='black')
        plt.setp(ax.get_yticklabels(), rotation=0, color='black')
        ax.set_title('Correlation Matrix', fontsize=14, fontweight='bold')

        fig.tight_layout()

        return self._save(fig, file_name)

    def plot_co2_by_vehicle_class(
        self,
        df: pd.DataFrame,
        file_name: str = "co2_by_vehicle_class.png"
    ) -> Path:
        """
        Boxplot of CO2 emissions grouped by vehicle class.

        Args:
            df: Raw dataset
            file_name: Output file name

        Returns:
            Path to saved plot
        """
        plot_df = df[[GROUP_COLUMN, TARGET_COLUMN]].dropna().copy()
        plot_df[GROUP_COLUMN] = plot_df[GROUP_COLUMN].astype(str)
        order = sorted(plot_df[GROUP_COLUMN].unique())

        fig, ax = plt.subplots(figsize=self._figsize(self.config['boxplot_size']))

        sns.boxplot(data=plot_df, x=GROUP_COLUMN, y=TARGET_COLUMN, order=order, color='white', ax=ax)

        plt.setp(ax.get_xticklabels(), rotation=45, ha='right')
        ax.set_title('CO2 Emissions by Vehicle Class', fontsize=14, fontweight='bold')
        ax.set_xlabel('Vehicle Class', fontsize=12)
        ax.set_ylabel('CO2 Emissions', fontsize=12)

        fig.tight_layout()

        return self._save(fig, file_name)

    def plot_diagnostics(self, model: FittedModel, file_name: str = "diagnostic_plots.png") -> Path:
        """
        2x2 grid of regression diagnostics.

        Panels: residuals vs fitted, normal Q-Q of standardized residuals,
        scale-location, and residuals vs observation index.

        Args:
            model: Fitted model
            file_name: Output file name

        Returns:
            Path to saved plot
        """
        fitted = np.asarray(model.fittedvalues, dtype=float)
        resid = np.asarray(model.resid, dtype=float)
        std_resid = model.standardized_residuals()
        finite = np.isfinite(std_resid)

        fig, axes = plt.subplots(2, 2, figsize=self._figsize(self.config['diagnostics_size']))
        ax1, ax2, ax3, ax4 = axes.ravel()

        # Residuals vs fitted
        ax1.scatter(fitted, resid, alpha=0.6, s=15, edgecolors='black', facecolors='none')
        ax1.axhline(0, color='grey', linestyle='--', linewidth=1)
        _add_smoother(ax1, fitted, resid)
        ax1.set_xlabel('Fitted values')
        ax1.set_ylabel('Residuals')
        ax1.set_title('Residuals vs Fitted', fontweight='bold')

        # Q-Q
        stats.probplot(std_resid[finite], dist="norm", plot=ax2)
        ax2.set_xlabel('Theoretical Quantiles')
        ax2.set_ylabel('Standardized residuals')
        ax2.set_title('Normal Q-Q', fontweight='bold')

        # Scale-location
        sqrt_abs = np.sqrt(np.abs(std_resid[finite]))
        ax3.scatter(fitted[finite], sqrt_abs, alpha=0.6, s=15, edgecolors='black', facecolors='none')
        _add_smoother(ax3, fitted[finite], sqrt_abs)
        ax3.set_xlabel('Fitted values')
        ax3.set_ylabel(r'$\sqrt{|Standardized\ residuals|}$')
        ax3.set_title('Scale-Location', fontweight='bold')

        # Residuals vs index
        ax4.plot(np.arange(1, len(resid) + 1), resid, 'o', markersize=3, alpha=0.6)
        ax4.axhline(0, color='grey', linestyle='--', linewidth=1)
        ax4.set_xlabel('Observation index')
        ax4.set_ylabel('Residuals')
        ax4.set_title('Residuals vs Index', fontweight='bold')

        fig.suptitle(model.formula, fontsize=10)
        fig.tight_layout()

        return self._save(fig, file_name)


def correlation_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """Pearson correlation over every numeric column of ``df``."""
    numeric = df.select_dtypes(include=[np.number])
    return numeric.corr(method='pearson')


def _add_smoother(ax, x: np.ndarray, y: np.ndarray) -> None:
    """Red lowess line through a scatter, as in R's diagnostic plots."""
    if len(x) < 3 or np.ptp(x) == 0:
        return
    smoothed = lowess(y, x, frac=2 / 3, return_sorted=True)
    ax.plot(smoothed[:, 0], smoothed[:, 1], color='red', linewidth=1.5)
