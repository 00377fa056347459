"""Tests for argument parsing, validation and the main entry point."""

import pytest

from chebflow import config
import main


class TestConfig:

    def test_defaults(self):
        args = config.get_args([])
        assert args.nx == 64
        assert args.ny == 64
        assert args.ra == 1e5
        assert args.pr == 1.0
        assert args.save_intervall == 1.0
        assert args.max_walltime is None
        assert args.restart is None
        assert args.workers == 1
        config.validate_args(args)

    def test_overrides(self):
        args = config.get_args(["--nx", "32", "--ra", "1e6", "--log_level", "DEBUG"])
        assert args.nx == 32
        assert args.ra == 1e6
        assert args.log_level == "DEBUG"

    @pytest.mark.parametrize("argv", [
        ["--nx", "1"],
        ["--ny", "3"],
        ["--aspect", "0"],
        ["--ra", "-1"],
        ["--pr", "0"],
        ["--dt", "0"],
        ["--max_time", "0"],
        ["--dt", "0.1", "--save_intervall", "0.01"],
        ["--max_walltime", "0"],
        ["--workers", "0"],
    ])
    def test_invalid(self, argv):
        with pytest.raises(ValueError):
            config.validate_args(config.get_args(argv))

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            config.get_args(["--log_level", "VERBOSE"])


class TestMain:

    def test_invalid_configuration_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main.main(["--dt", "-1"])
        assert excinfo.value.code == 1

    def test_short_run(self, tmp_path):
        argv = [
            "--nx", "8", "--ny", "8", "--dt", "0.01", "--max_time", "0.02",
            "--save_intervall", "0.01", "--outdir", str(tmp_path),
        ]
        assert main.main(argv) == 0
        assert (tmp_path / "flow0.000.h5").exists()
        assert (tmp_path / "flow0.020.h5").exists()
        assert (tmp_path / "diagnostics.h5").exists()

    def test_restart(self, tmp_path):
        argv = [
            "--nx", "8", "--ny", "8", "--dt", "0.01", "--max_time", "0.02",
            "--save_intervall", "0.01", "--outdir", str(tmp_path / "first"),
        ]
        main.main(argv)
        restart = str(tmp_path / "first" / "flow0.020.h5")
        argv = [
            "--nx", "8", "--ny", "8", "--dt", "0.01", "--max_time", "0.04",
            "--save_intervall", "0.01", "--outdir", str(tmp_path / "second"),
            "--restart", restart,
        ]
        assert main.main(argv) == 0
        assert (tmp_path / "second" / "flow0.040.h5").exists()
