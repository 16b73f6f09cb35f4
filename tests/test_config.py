"""
Tests for settings loading.
"""

from pathlib import Path

import pytest

from src.flight_network.config import Settings, load_settings


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        settings = load_settings({})

        assert settings == Settings()
        assert settings.port == 8080
        assert settings.airlines_path == Path("data") / "airlines.dat"

    def test_prefixed_overrides(self):
        settings = load_settings({
            "FLIGHT_NETWORK_DATA_DIR": "/srv/openflights",
            "FLIGHT_NETWORK_ROUTES_FILE": "routes-2014.dat",
            "FLIGHT_NETWORK_PORT": "9000",
            "FLIGHT_NETWORK_LOG_LEVEL": "debug",
        })

        assert settings.routes_path == Path("/srv/openflights") / "routes-2014.dat"
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"

    def test_unprefixed_names_ignored(self):
        assert load_settings({"PORT": "1"}).port == 8080

    def test_bad_port_raises(self):
        with pytest.raises(ValueError, match="FLIGHT_NETWORK_PORT"):
            load_settings({"FLIGHT_NETWORK_PORT": "eighty"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("FLIGHT_NETWORK_HOST", "127.0.0.1")
        assert load_settings().host == "127.0.0.1"
