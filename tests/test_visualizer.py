import matplotlib.image as mpimg
import pytest

from fuel_analysis.exceptions import PlotWriteError
from fuel_analysis.stage2.features import FeatureTransformer
from fuel_analysis.stage3.models import ModelFitter
from fuel_analysis.stage4.visualizer import Visualizer, correlation_matrix


def _pixel_size(path):
    height, width = mpimg.imread(path).shape[:2]
    return width, height


@pytest.fixture
def visualizer(tmp_path):
    return Visualizer(output_dir=str(tmp_path / "plots"))


def test_output_directory_created(tmp_path):
    Visualizer(output_dir=str(tmp_path / "nested" / "plots"))
    assert (tmp_path / "nested" / "plots").is_dir()


def test_histogram(visualizer, fuel_df):
    path = visualizer.plot_co2_histogram(fuel_df)

    assert path.name == "co2_emissions_hist.png"
    assert path.exists()
    assert _pixel_size(path) == (480, 480)


def test_correlation_matrix_plot(visualizer, fuel_df):
    path = visualizer.plot_correlation_matrix(fuel_df)

    assert path.name == "correlation_matrix.png"
    assert _pixel_size(path) == (800, 800)


def test_boxplot(visualizer, fuel_df):
    path = visualizer.plot_co2_by_vehicle_class(fuel_df)

    assert path.name == "co2_by_vehicle_class.png"
    assert _pixel_size(path) == (1000, 600)


def test_diagnostic_plots(visualizer, fuel_df):
    model = ModelFitter().fit(FeatureTransformer().encode(fuel_df))

    path = visualizer.plot_diagnostics(model, "diagnostic_plots.png")

    assert path.exists()
    assert _pixel_size(path) == (1000, 1000)


def test_correlation_covers_numeric_columns_only(fuel_df):
    corr = correlation_matrix(fuel_df)

    assert 'VEHICLECLASS' not in corr.columns
    assert 'CO2EMISSIONS' in corr.columns
    assert 'MODELYEAR' in corr.columns
    assert corr.loc['ENGINESIZE', 'ENGINESIZE'] == pytest.approx(1.0)
    assert (corr == corr.T).all().all()


def test_unwritable_directory_raises(tmp_path):
    blocker = tmp_path / "plots"
    blocker.write_text("not a directory")

    with pytest.raises(PlotWriteError):
        Visualizer(output_dir=str(blocker / "inner"))


def test_plot_write_error_is_an_io_error(tmp_path):
    blocker = tmp_path / "plots"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        Visualizer(output_dir=str(blocker))
