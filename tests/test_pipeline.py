import numpy as np
import pandas as pd
import pytest
import yaml

from fuel_analysis.exceptions import DataLoadError, ValidationError
from fuel_analysis.main import Pipeline, main


def test_end_to_end_run(pipeline_config, tmp_path):
    results = Pipeline(config=pipeline_config).run()

    assert results['split'].n_train == 40
    assert results['split'].n_test == 10
    assert results['summary']['row_count'] == 50
    assert results['model'].nobs == 40
    assert results['transform_decision'] in ('keep', 'log', 'boxcox')

    plots_dir = tmp_path / "plots"
    for name in [
        "co2_emissions_hist.png",
        "correlation_matrix.png",
        "co2_by_vehicle_class.png",
        "diagnostic_plots.png",
        "diagnostic_plots_transformed.png",
    ]:
        assert (plots_dir / name).exists()

    report = results['report']
    assert report[0] == "Model Performance Metrics:"
    assert any(line.startswith("RMSE: ") for line in report)
    assert any(line.startswith("Breusch-Pagan test p-value: ") for line in report)


def test_evaluation_uses_original_model(pipeline_config):
    results = Pipeline(config=pipeline_config).run()

    assert results['evaluation'].r_squared == results['model'].rsquared
    if results['transform_decision'] == 'keep':
        assert results['transformed_model'] is results['model']


def test_runs_are_reproducible(pipeline_config):
    first = Pipeline(config=pipeline_config).run()
    second = Pipeline(config=pipeline_config).run()

    assert list(first['split'].train_index) == list(second['split'].train_index)
    pd.testing.assert_series_equal(first['model'].params, second['model'].params)
    assert first['evaluation'].metrics() == second['evaluation'].metrics()
    assert first['boxcox'].best_lambda == second['boxcox'].best_lambda


def test_train_only_scaling_keeps_partition(pipeline_config):
    full = Pipeline(config=pipeline_config).run()

    pipeline_config.set('scaling.fit_on', 'train')
    train_only = Pipeline(config=pipeline_config).run()

    assert list(full['split'].test_index) == list(train_only['split'].test_index)
    # scaling is linear, so the fitted values do not depend on where the statistics came from
    np.testing.assert_allclose(
        full['model'].fittedvalues, train_only['model'].fittedvalues, rtol=1e-8
    )
    assert full['evaluation'].rmse == pytest.approx(train_only['evaluation'].rmse)


def test_missing_column_fails_in_load_stage(pipeline_config, fuel_df, tmp_path):
    path = tmp_path / "broken.csv"
    fuel_df.drop(columns=['FUELTYPE']).to_csv(path, index=False)
    pipeline_config.set('data.path', str(path))

    with pytest.raises(DataLoadError) as excinfo:
        Pipeline(config=pipeline_config).run()

    assert excinfo.value.stage == 'load'
    assert 'FUELTYPE' in excinfo.value.message


def test_unknown_scaling_mode_rejected(pipeline_config):
    pipeline_config.set('scaling.fit_on', 'test')

    with pytest.raises(ValidationError):
        Pipeline(config=pipeline_config).run()


def test_cli_success(fuel_csv, tmp_path, clean_env, capsys):
    exit_code = main([
        '--config', str(tmp_path / "missing.yaml"),
        '--data-path', str(fuel_csv),
        '--plots-dir', str(tmp_path / "cli_plots"),
    ])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Model Performance Metrics:" in out
    assert "Recommendations:" in out
    assert (tmp_path / "cli_plots" / "diagnostic_plots.png").exists()


def test_cli_missing_file(tmp_path, clean_env, capsys):
    exit_code = main([
        '--config', str(tmp_path / "missing.yaml"),
        '--data-path', str(tmp_path / "nope.csv"),
        '--plots-dir', str(tmp_path / "cli_plots"),
    ])

    assert exit_code == 1
    assert "Stage 'load' failed" in capsys.readouterr().err


def test_transformed_model_follows_decision(pipeline_config):
    results = Pipeline(config=pipeline_config).run()

    decision = results['transform_decision']
    transformed = results['transformed_model']
    if decision == 'keep':
        assert transformed is results['model']
    else:
        assert transformed.response == decision


def test_cli_invalid_split_fraction(fuel_csv, tmp_path, clean_env, capsys):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({'split': {'train_fraction': 1.5}}))

    exit_code = main([
        '--config', str(config_file),
        '--data-path', str(fuel_csv),
        '--plots-dir', str(tmp_path / "cli_plots"),
    ])

    assert exit_code == 1
    assert "Stage 'split' failed" in capsys.readouterr().err
