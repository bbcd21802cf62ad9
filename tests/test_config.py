import pytest
import yaml

from fuel_analysis.config import Config


@pytest.fixture
def missing_config(tmp_path):
    return str(tmp_path / "missing.yaml")


def test_defaults_when_file_missing(missing_config, clean_env):
    config = Config(missing_config)

    assert config.get('split.random_seed') == 123
    assert config.get('split.train_fraction') == 0.8
    assert config.get('scaling.fit_on') == 'full'
    assert config.get('boxcox.lambda_step') == 0.1
    assert config.get('data.path') == 'FuelConsumption.csv'


def test_yaml_values_merge_over_defaults(tmp_path, clean_env):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({'split': {'random_seed': 7}, 'scaling': {'fit_on': 'train'}}))

    config = Config(str(config_file))

    assert config.get('split.random_seed') == 7
    assert config.get('scaling.fit_on') == 'train'
    # untouched keys keep their defaults
    assert config.get('split.train_fraction') == 0.8
    assert config.get('scaling.ddof') == 1


def test_empty_yaml_keeps_defaults(tmp_path, clean_env):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    config = Config(str(config_file))

    assert config.get('split.random_seed') == 123


def test_environment_overrides(monkeypatch, missing_config, clean_env):
    monkeypatch.setenv('RANDOM_SEED', '99')
    monkeypatch.setenv('FUEL_DATA_PATH', '/data/fuel.csv')
    monkeypatch.setenv('SCALE_ON', 'train')

    config = Config(missing_config)

    assert config.get('split.random_seed') == 99
    assert config.get('data.path') == '/data/fuel.csv'
    assert config.get('scaling.fit_on') == 'train'


def test_dot_notation_get_and_set(missing_config, clean_env):
    config = Config(missing_config)

    config.set('output.plots_dir', 'out')
    config.set('extra.nested.value', 5)

    assert config.get('output.plots_dir') == 'out'
    assert config.get('extra.nested.value') == 5
    assert config.get('no.such.key', 'fallback') == 'fallback'


def test_to_dict_is_a_copy(missing_config, clean_env):
    config = Config(missing_config)

    snapshot = config.to_dict()
    snapshot['split']['random_seed'] = 0

    assert config.get('split.random_seed') == 123
    assert config.get_stage_config('boxcox')['lambda_min'] == -2.0
