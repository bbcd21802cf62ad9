import numpy as np
import pandas as pd

from fuel_analysis.stage1.explorer import Explorer
from fuel_analysis.utils.stats_utils import count_duplicate_rows, calculate_basic_stats


def test_row_count_matches_dataset(fuel_df):
    summary = Explorer().explore(fuel_df)

    assert summary['row_count'] == len(fuel_df)
    assert summary['column_count'] == len(fuel_df.columns)
    assert summary['columns']['CO2EMISSIONS']['count'] == len(fuel_df)


def test_duplicate_rows_counted(fuel_df):
    with_dupes = pd.concat([fuel_df, fuel_df.iloc[[0, 1, 1]]], ignore_index=True)

    summary = Explorer().explore(with_dupes)

    assert summary['duplicate_rows'] == 3
    assert summary['duplicate_rows'] == len(with_dupes) - len(with_dupes.drop_duplicates())


def test_missing_values_per_column(fuel_df):
    df = fuel_df.copy()
    df.loc[[2, 5], 'ENGINESIZE'] = np.nan
    df.loc[7, 'MAKE'] = np.nan

    summary = Explorer().explore(df)

    assert summary['missing_values']['ENGINESIZE'] == 2
    assert summary['missing_values']['MAKE'] == 1
    assert summary['missing_values']['CO2EMISSIONS'] == 0


def test_explore_does_not_modify_input(fuel_df):
    before = fuel_df.copy()
    Explorer().explore(fuel_df)
    pd.testing.assert_frame_equal(fuel_df, before)


def test_numeric_and_categorical_stats(fuel_df):
    summary = Explorer().explore(fuel_df)

    engine = summary['columns']['ENGINESIZE']
    assert engine['type'] == 'numeric'
    assert engine['min'] <= engine['q25'] <= engine['median'] <= engine['q75'] <= engine['max']

    vclass = summary['columns']['VEHICLECLASS']
    assert vclass['type'] == 'categorical'
    assert vclass['cardinality'] == 3
    assert sum(vclass['top_values'].values()) == len(fuel_df)


def test_count_duplicate_rows_no_duplicates():
    df = pd.DataFrame({'a': [1, 2, 3], 'b': ['x', 'y', 'z']})
    assert count_duplicate_rows(df) == 0


def test_basic_stats_mean():
    stats = calculate_basic_stats(pd.Series([10, 20, 30, 40, 50]), 'numeric')
    assert stats['mean'] == 30.0
    assert stats['null_count'] == 0
