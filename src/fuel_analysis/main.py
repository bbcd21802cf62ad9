"""
Main Pipeline Orchestrator

Runs the fuel consumption CO2 analysis from the raw CSV to the final report.

Usage:
    # Run with config/pipeline_config.yaml
    python -m fuel_analysis.main

    # Override the input file and plot directory
    python -m fuel_analysis.main --data-path data/FuelConsumption.csv --plots-dir out/plots

    # Scale predictors with training-partition statistics only
    python -m fuel_analysis.main --scale-on train
"""

import argparse
import sys
from contextlib import contextmanager
from typing import Dict, Any, Optional

import numpy as np

from .config import Config
from .constants import TARGET_COLUMN
from .exceptions import PipelineError, ValidationError
from .utils.logging_utils import setup_logger, get_logger, ROOT_LOGGER_NAME

from .stage1.loader import load_fuel_data
from .stage1.explorer import Explorer
from .stage2.features import FeatureTransformer
from .stage2.splitter import Splitter
from .stage3.models import ModelFitter
from .stage3.diagnostics import run_diagnostics
from .stage3.transform import BoxCoxSearch, choose_transform, transform_model
from .stage4.visualizer import Visualizer
from .stage4.evaluator import Evaluator
from .stage4.report import build_report

logger = get_logger(__name__)

SCALE_MODES = ('full', 'train')


class Pipeline:
    """
    Main pipeline orchestrator.

    Runs every stage in order; any failure stops the run with the name of
    the stage that failed.

    Example:
        >>> pipeline = Pipeline()
        >>> results = pipeline.run()
        >>> print("\\n".join(results['report']))
    """

    def __init__(self, config: Optional[Config] = None, config_file: Optional[str] = None):
        """
        Initialize the pipeline.

        Args:
            config: Ready Config instance (takes precedence over config_file)
            config_file: Path to config file (optional)
        """
        self.config = config or Config(config_file)

        log_config = self.config.get_stage_config('logging')
        file_config = log_config.get('file', {})
        setup_logger(
            ROOT_LOGGER_NAME,
            log_file=file_config.get('path') if file_config.get('enabled') else None,
            level=log_config.get('level', 'INFO')
        )

        logger.info("=" * 80)
        logger.info("Fuel Consumption CO2 Analysis Initialized")
        logger.info("=" * 80)

    @contextmanager
    def _stage(self, name: str):
        """Log a stage banner and tag any failure with the stage name."""
        logger.info("")
        logger.info("=" * 80)
        logger.info(f"STAGE: {name}")
        logger.info("=" * 80)

        try:
            yield
        except PipelineError as e:
            if e.stage is None:
                e.stage = name
            logger.error(f"Stage '{name}' failed: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Stage '{name}' failed: {type(e).__name__}: {e}")
            raise

    def run(self) -> Dict[str, Any]:
        """
        Run the complete analysis.

        Returns:
            Results dictionary with the data summary, split, models,
            diagnostics, Box-Cox search, evaluation, report lines and plot paths
        """
        seed = int(self.config.get('split.random_seed', 123))
        np.random.seed(seed)

        scale_on = self.config.get('scaling.fit_on', 'full')
        plots = {}

        with self._stage("load"):
            if scale_on not in SCALE_MODES:
                raise ValidationError(f"scaling.fit_on must be one of {SCALE_MODES}, got '{scale_on}'")
            df = load_fuel_data(self.config.get('data.path'))

        with self._stage("explore"):
            summary = Explorer().explore(df)

        with self._stage("visualize"):
            visualizer = Visualizer(
                output_dir=self.config.get('output.plots_dir', 'plots'),
                config=self.config.get_stage_config('visualization')
            )
            plots['histogram'] = visualizer.plot_co2_histogram(df)
            plots['correlation'] = visualizer.plot_correlation_matrix(df)
            plots['boxplot'] = visualizer.plot_co2_by_vehicle_class(df)

        with self._stage("feature engineering"):
            transformer = FeatureTransformer(ddof=int(self.config.get('scaling.ddof', 1)))
            encoded = transformer.encode(df)

        with self._stage("split"):
            split_config = self.config.get_stage_config('split')
            splitter = Splitter(
                train_fraction=float(split_config.get('train_fraction', 0.8)),
                random_seed=seed,
                stratify=bool(split_config.get('stratify', True)),
                n_bins=int(split_config.get('n_bins', 4))
            )
            split = splitter.split(encoded, target=TARGET_COLUMN)

        with self._stage("scale"):
            if scale_on == 'full':
                logger.warning(
                    "Scaling statistics come from the full dataset, test rows included "
                    "(set scaling.fit_on: train to avoid the leakage)"
                )
                transformer.fit(encoded)
            else:
                transformer.fit(encoded.loc[split.train_index])
            scaled = transformer.transform(encoded)
            train_df, test_df = split.apply(scaled)

        with self._stage("fit model"):
            fitter = ModelFitter()
            model = fitter.fit(train_df)
            plots['diagnostics'] = visualizer.plot_diagnostics(model, "diagnostic_plots.png")

        with self._stage("diagnostics"):
            diagnostics = run_diagnostics(model)

        with self._stage("box-cox transform"):
            boxcox_config = self.config.get_stage_config('boxcox')
            search = BoxCoxSearch(
                lambda_min=float(boxcox_config.get('lambda_min', -2.0)),
                lambda_max=float(boxcox_config.get('lambda_max', 2.0)),
                lambda_step=float(boxcox_config.get('lambda_step', 0.1)),
                show_progress=bool(boxcox_config.get('show_progress', False))
            )
            boxcox = search.search(model)

            keep_threshold = float(boxcox_config.get('keep_threshold', 0.1))
            log_threshold = float(boxcox_config.get('log_threshold', 0.001))
            decision = choose_transform(boxcox.best_lambda, keep_threshold, log_threshold)
            transformed_model = transform_model(
                model, train_df, boxcox.best_lambda,
                fitter=fitter,
                decision=decision
            )
            plots['diagnostics_transformed'] = visualizer.plot_diagnostics(
                transformed_model, "diagnostic_plots_transformed.png"
            )

        with self._stage("evaluate"):
            evaluation = Evaluator().evaluate(model, test_df)
            report = build_report(evaluation, diagnostics, boxcox)

        logger.info("")
        logger.info("=" * 80)
        logger.info("PIPELINE COMPLETE")
        logger.info("=" * 80)

        return {
            'summary': summary,
            'split': split,
            'scaling': transformer.get_params(),
            'model': model,
            'diagnostics': diagnostics,
            'boxcox': boxcox,
            'transform_decision': decision,
            'transformed_model': transformed_model,
            'evaluation': evaluation,
            'report': report,
            'plots': plots
        }


def main(argv=None):
    """
    CLI entry point for the pipeline.

    Usage:
        fuel-analysis
        fuel-analysis --data-path FuelConsumption.csv --plots-dir plots
        fuel-analysis --scale-on train --verbose
    """
    parser = argparse.ArgumentParser(
        description="Fuel consumption CO2 emissions regression analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--config',
        help='Path to config file (default: config/pipeline_config.yaml)'
    )

    parser.add_argument(
        '--data-path',
        help='Path to the fuel consumption CSV'
    )

    parser.add_argument(
        '--plots-dir',
        help='Directory for plot images'
    )

    parser.add_argument(
        '--scale-on',
        choices=list(SCALE_MODES),
        help='Rows the scaling statistics come from'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args(argv)

    config = Config(args.config)
    if args.data_path:
        config.set('data.path', args.data_path)
    if args.plots_dir:
        config.set('output.plots_dir', args.plots_dir)
    if args.scale_on:
        config.set('scaling.fit_on', args.scale_on)
    if args.verbose:
        config.set('logging.level', 'DEBUG')

    pipeline = Pipeline(config=config)

    try:
        results = pipeline.run()
    except (PipelineError, OSError) as e:
        stage = getattr(e, 'stage', None) or 'unknown'
        message = getattr(e, 'message', None) or str(e)
        print(f"\n✗ Stage '{stage}' failed: {message}", file=sys.stderr)
        return 1

    print()
    print("\n".join(results['report']))

    return 0


if __name__ == '__main__':
    sys.exit(main())
