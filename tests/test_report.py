"""Tests for text reporting, plotting and the command line."""

import pytest

from clt_montecarlo import ExperimentConfig, CentralLimitExperiment
from clt_montecarlo.cli import main
from clt_montecarlo.report import format_run_summary, format_statistics

try:
    import matplotlib  # noqa: F401

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


@pytest.fixture(scope="module")
def result():
    config = ExperimentConfig(pdf="parabolic", num_iterations=20, num_means=400)
    return CentralLimitExperiment(config).run()


class TestReport:
    """Test the statistics table."""

    def test_format_statistics(self, result):
        """Test the table layout and values."""
        lines = format_statistics(result).splitlines()
        assert lines[0] == "STATISTICS"
        assert "Predicted" in lines[1] and "Experimental" in lines[1]
        assert lines[2].startswith("Mean:")
        assert lines[3].startswith("Stdev:")
        assert f"{result.predicted_mean:.6f}" in lines[2]
        assert f"{result.empirical_mean:.6f}" in lines[2]
        assert f"{result.predicted_stdev:.6f}" in lines[3]
        assert f"{result.empirical_stdev:.6f}" in lines[3]

    def test_precision(self, result):
        """Test the number of decimals is configurable."""
        text = format_statistics(result, precision=2)
        assert f"{result.predicted_mean:.2f}" in text

    def test_run_summary(self, result):
        """Test the one line run description."""
        summary = format_run_summary(result)
        assert "pdf=parabolic" in summary
        assert "num_means=400" in summary
        assert "out_of_range=" in summary


@pytest.mark.skipif(not HAS_MATPLOTLIB, reason="matplotlib not installed")
class TestPlotting:
    """Test the four panel figure."""

    def test_plot_result(self, result, tmp_path):
        """Test drawing and saving the figure."""
        from clt_montecarlo.plotting import plot_result

        path = tmp_path / "plot.png"
        fig = plot_result(result, path=str(path))
        assert len(fig.axes) == 4
        assert path.exists()
        assert path.stat().st_size > 0


class TestCommandLine:
    """Test the clt-montecarlo entry point."""

    def test_run(self, capsys):
        """Test a small run prints the statistics table."""
        code = main(
            ["--pdf", "uniform", "--num-iterations", "10", "--num-means", "100"]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "STATISTICS" in out
        assert "pdf=uniform" in out

    def test_config_file(self, tmp_path, capsys):
        """Test settings from a JSON file with a command line override."""
        path = tmp_path / "experiment.json"
        path.write_text('{"pdf": "step", "num_iterations": 5, "num_means": 50}')
        code = main(["--config", str(path), "--seed", "9"])
        out = capsys.readouterr().out
        assert code == 0
        assert "pdf=step" in out
        assert "seed=9" in out

    def test_workers_switch_streams(self, capsys):
        """Test that asking for workers selects per-trial streams."""
        code = main(
            ["--pdf", "uniform", "--num-iterations", "5", "--num-means", "20",
             "--workers", "2"]
        )
        assert code == 0
        assert "STATISTICS" in capsys.readouterr().out

    def test_invalid_domain(self, capsys):
        """Test that configuration errors exit with status 1."""
        code = main(["--xmin", "5", "--xmax", "1"])
        assert code == 1
        assert "error:" in capsys.readouterr().err

    def test_list_presets(self, capsys):
        """Test listing the built-in densities."""
        assert main(["--list-presets"]) == 0
        out = capsys.readouterr().out.split()
        assert "lopsided" in out
        assert "parabolic" in out

    @pytest.mark.skipif(not HAS_MATPLOTLIB, reason="matplotlib not installed")
    def test_plot_option(self, tmp_path, capsys):
        """Test that --plot writes the figure."""
        path = tmp_path / "plot.png"
        code = main(
            ["--pdf", "normal", "--num-iterations", "10", "--num-means", "100",
             "--plot", str(path)]
        )
        assert code == 0
        assert path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
