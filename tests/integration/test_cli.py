"""Integration tests for the command line entry point and trial plots."""

import pandas as pd

from resiliencysim.analysis import plot_trial
from resiliencysim.cli import build_parser, main
from resiliencysim.experiment import SlimRow, read_parameter_vectors


def write_params(path, lines):
    path.write_text("\n".join(",".join(str(v) for v in line) for line in lines) + "\n")
    return path


class TestParameterFile:
    def test_reads_headerless_vectors(self, tmp_path):
        params = write_params(tmp_path / "params.csv", [[400, 30, 0.999, 40], [300, 35, 0.99, 45]])
        assert read_parameter_vectors(params) == [[400.0, 30.0, 0.999, 40.0], [300.0, 35.0, 0.99, 45.0]]


class TestParser:
    def test_positional_arguments(self):
        args = build_parser().parse_args(["A", "latency2", "params.csv", "out", "--seed", "5"])
        assert args.model == "A"
        assert args.injector == "latency2"
        assert args.params == "params.csv"
        assert args.output == "out"
        assert args.seed == 5
        assert args.arrivals is None
        assert not args.plot


class TestMain:
    def test_runs_one_trial_per_line(self, tmp_path, test_output_dir):
        params = write_params(tmp_path / "params.csv", [[400, 30, 0.999, 40], [400, 30, 0.999, 60]])

        code = main(["A", "latency2", str(params), str(test_output_dir), "--arrivals", "500"])

        assert code == 0
        assert (test_output_dir / "A-0-SteadyLatency.csv").exists()
        assert (test_output_dir / "A-1-SteadyLatency.csv").exists()
        assert len(pd.read_csv(test_output_dir / "A-0-SteadyLatency.csv").columns) == 27

    def test_unknown_model_exit_code(self, tmp_path):
        params = write_params(tmp_path / "params.csv", [[400, 30, 0.999, 40]])
        assert main(["Q", "latency2", str(params), str(tmp_path / "out")]) == 2
        assert not (tmp_path / "out").exists()

    def test_unknown_injector_checked_before_params_are_read(self, tmp_path):
        missing = tmp_path / "missing.csv"
        assert main(["A", "retry", str(missing), str(tmp_path / "out")]) == 2
        assert not (tmp_path / "out").exists()

    def test_plot_option_writes_png(self, tmp_path, test_output_dir):
        params = write_params(tmp_path / "params.csv", [[400, 10, 30, 0.999, 200]])

        code = main(["G", "capacity", str(params), str(test_output_dir), "--arrivals", "1500", "--plot"])

        assert code == 0
        assert (test_output_dir / "G-0-SteadyCapacity.png").exists()


class TestPlot:
    def test_plot_with_missing_values(self, test_output_dir):
        rows = [
            SlimRow(tick=1000.0, load_from_x=10, mean_latency_from_y=30.0, mean_response_p1_availability=1.0),
            SlimRow(tick=2000.0, load_from_x=12),
        ]
        path = plot_trial(rows, test_output_dir / "trial.png", title="two rows")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_plot_empty_trial(self, test_output_dir):
        path = plot_trial([], test_output_dir / "empty.png")
        assert path.exists()
