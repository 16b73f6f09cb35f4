"""
Fixtures for FastAPI endpoint tests.

Builds the app around the shared sample network, with a temporary
static directory so the index page can be served.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.fastapi.network_api import create_app
from src.flight_network.application import FlightNetwork
from src.flight_network.config import Settings


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    static = tmp_path / "static"
    static.mkdir()
    (static / "index.html").write_text("<html><body>Flight Network</body></html>", encoding="utf-8")
    return static


@pytest.fixture
def network(provider) -> FlightNetwork:
    return FlightNetwork(data_provider=provider)


@pytest.fixture
def client(network: FlightNetwork, static_dir: Path) -> TestClient:
    app = create_app(network=network, settings=Settings(static_dir=str(static_dir)))
    return TestClient(app)
