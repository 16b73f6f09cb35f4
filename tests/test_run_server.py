"""
Tests for the server entry point helpers.
"""

from pathlib import Path

import pytest

from run_server import apply_args, main, parse_args
from src.flight_network.config import Settings


class TestArgs:
    """Tests for command-line handling."""

    def test_no_args_keeps_settings(self):
        settings = Settings(port=9000)
        assert apply_args(settings, parse_args([])) == settings

    def test_explicit_files_used_as_given(self):
        args = parse_args(["a.dat", "b.dat", "c.dat", "--port", "8181"])
        settings = apply_args(Settings(), args)

        assert settings.airlines_path == Path("a.dat")
        assert settings.airports_path == Path("b.dat")
        assert settings.routes_path == Path("c.dat")
        assert settings.port == 8181

    def test_partial_file_list_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["a.dat", "b.dat"])


class TestMain:
    """Tests for startup failure handling."""

    def test_missing_files_exit_nonzero(self, tmp_path: Path):
        missing = [str(tmp_path / name) for name in ("airlines.dat", "airports.dat", "routes.dat")]
        assert main(missing) == 1
