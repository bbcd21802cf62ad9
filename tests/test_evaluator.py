import numpy as np
import pandas as pd
import pytest

from fuel_analysis.exceptions import ValidationError
from fuel_analysis.stage2.features import FeatureTransformer
from fuel_analysis.stage2.splitter import Splitter
from fuel_analysis.stage3.models import ModelFitter
from fuel_analysis.stage4.evaluator import Evaluator


def _fit_and_split(df):
    transformer = FeatureTransformer()
    scaled = transformer.fit_transform(transformer.encode(df))
    train_df, test_df = Splitter(random_seed=123).split(scaled).apply(scaled)
    return ModelFitter().fit(train_df), test_df


def test_noiseless_data_gives_zero_error(make_fuel_data):
    model, test_df = _fit_and_split(make_fuel_data(noise=0.0))

    result = Evaluator().evaluate(model, test_df)

    assert result.rmse == pytest.approx(0.0, abs=1e-6)
    assert result.mae == pytest.approx(0.0, abs=1e-6)
    assert result.r_squared == pytest.approx(1.0)
    assert result.test_r_squared == pytest.approx(1.0)


def test_metrics_on_noisy_data(fuel_df):
    model, test_df = _fit_and_split(fuel_df)

    result = Evaluator().evaluate(model, test_df)

    assert result.rmse >= 0
    assert result.mae >= 0
    assert result.mae <= result.rmse
    assert result.n_scored == len(test_df)
    assert result.n_dropped == 0

    errors = test_df['CO2EMISSIONS'] - result.predictions
    assert result.rmse == pytest.approx(np.sqrt(np.mean(errors ** 2)))
    assert result.mae == pytest.approx(np.mean(np.abs(errors)))


def test_reported_r_squared_is_training_fit(fuel_df):
    model, test_df = _fit_and_split(fuel_df)

    result = Evaluator().evaluate(model, test_df)

    assert result.r_squared == model.rsquared


def test_rows_with_unseen_category_are_dropped(fuel_df):
    model, test_df = _fit_and_split(fuel_df)

    extra = test_df.iloc[[0]].copy()
    extra.index = [999]
    extra['VEHICLECLASS'] = pd.Categorical(['PICKUP TRUCK'])
    combined = pd.concat([test_df.astype({'VEHICLECLASS': str}), extra.astype({'VEHICLECLASS': str})])

    result = Evaluator().evaluate(model, combined)

    assert result.n_dropped == 1
    assert result.n_scored == len(test_df)
    assert 999 not in result.predictions.index


def test_nothing_to_score_raises(fuel_df):
    model, test_df = _fit_and_split(fuel_df)

    unusable = test_df.astype({'FUELTYPE': str}).assign(FUELTYPE='HYDROGEN')

    with pytest.raises(ValidationError):
        Evaluator().evaluate(model, unusable)


def test_log_model_scored_on_log_scale(fuel_df):
    transformer = FeatureTransformer()
    scaled = transformer.fit_transform(transformer.encode(fuel_df))
    train_df, test_df = Splitter(random_seed=123).split(scaled).apply(scaled)
    model = ModelFitter().fit(train_df, response='log')

    result = Evaluator().evaluate(model, test_df)

    np.testing.assert_allclose(result.actual, np.log(test_df['CO2EMISSIONS']))
    assert result.rmse < 1.0
