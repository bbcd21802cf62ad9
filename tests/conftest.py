import numpy as np
import pandas as pd
import pytest

from fuel_analysis.config import Config

VEHICLE_CLASSES = ['COMPACT', 'MID-SIZE', 'SUV - SMALL']
TRANSMISSIONS = ['A6', 'AS6', 'M6']
FUEL_TYPES = ['D', 'X', 'Z']

CLASS_EFFECT = {'COMPACT': 0.0, 'MID-SIZE': 6.0, 'SUV - SMALL': 15.0}
TRANSMISSION_EFFECT = {'A6': 0.0, 'AS6': -4.0, 'M6': 3.0}
FUEL_EFFECT = {'D': 0.0, 'X': 8.0, 'Z': 12.0}


def _make_fuel_data(n=50, noise=3.0, seed=123):
    """
    Synthetic fuel consumption table with known coefficients.

    CO2EMISSIONS = 30 + 10*ENGINESIZE + 5*CYLINDERS + 18*FUELCONSUMPTION_COMB
                   + class, transmission and fuel effects + noise
    """
    rng = np.random.default_rng(seed)
    i = np.arange(n)

    cylinders = rng.choice([4.0, 6.0, 8.0], size=n)
    engine = np.round(cylinders * 0.5 + rng.normal(0, 0.3, size=n), 1)
    city = np.round(rng.uniform(7.0, 16.0, size=n), 1)
    hwy = np.round(city * 0.7 + rng.normal(0, 0.6, size=n), 1)
    comb = np.round(0.55 * city + 0.45 * hwy, 1)

    vehicle_class = np.array(VEHICLE_CLASSES)[i % 3]
    transmission = np.array(TRANSMISSIONS)[(i // 3) % 3]
    fuel_type = np.array(FUEL_TYPES)[(i // 9) % 3]

    co2 = (
        30.0
        + 10.0 * engine
        + 5.0 * cylinders
        + 18.0 * comb
        + np.array([CLASS_EFFECT[c] for c in vehicle_class])
        + np.array([TRANSMISSION_EFFECT[t] for t in transmission])
        + np.array([FUEL_EFFECT[f] for f in fuel_type])
        + rng.normal(0, noise, size=n)
    )

    return pd.DataFrame({
        'MODELYEAR': 2014,
        'MAKE': rng.choice(['ACURA', 'BMW', 'FORD', 'TOYOTA'], size=n),
        'VEHICLECLASS': vehicle_class,
        'ENGINESIZE': engine,
        'CYLINDERS': cylinders,
        'TRANSMISSION': transmission,
        'FUELTYPE': fuel_type,
        'FUELCONSUMPTION_CITY': city,
        'FUELCONSUMPTION_HWY': hwy,
        'FUELCONSUMPTION_COMB': comb,
        'CO2EMISSIONS': co2,
    })


@pytest.fixture
def make_fuel_data():
    return _make_fuel_data


@pytest.fixture
def fuel_df():
    return _make_fuel_data()


@pytest.fixture
def fuel_csv(tmp_path, fuel_df):
    path = tmp_path / "FuelConsumption.csv"
    fuel_df.to_csv(path, index=False)
    return path


@pytest.fixture
def clean_env(monkeypatch):
    for var in ['FUEL_DATA_PATH', 'PLOTS_DIR', 'RANDOM_SEED', 'SCALE_ON', 'LOG_LEVEL']:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def pipeline_config(tmp_path, fuel_csv, clean_env):
    config = Config(config_file=str(tmp_path / "no_such_config.yaml"))
    config.set('data.path', str(fuel_csv))
    config.set('output.plots_dir', str(tmp_path / "plots"))
    return config
