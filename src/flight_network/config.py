"""
Configuration module for the flight network service.

Loads environment variables (optionally from a .env file) and exposes
them as one immutable settings object.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

ENV_PREFIX = "FLIGHT_NETWORK_"


@dataclass(frozen=True)
class Settings:
    """
    Service settings.

    Attributes:
        data_dir: Directory holding the OpenFlights data files.
        airlines_file: Airlines file, relative to data_dir unless absolute.
        airports_file: Airports file, relative to data_dir unless absolute.
        routes_file: Routes file, relative to data_dir unless absolute.
        static_dir: Directory served under /static (index.html at /).
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
        log_level: Root logging level name.
    """

    data_dir: str = "data"
    airlines_file: str = "airlines.dat"
    airports_file: str = "airports.dat"
    routes_file: str = "routes.dat"
    static_dir: str = "static"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @property
    def airlines_path(self) -> Path:
        return Path(self.data_dir) / self.airlines_file

    @property
    def airports_path(self) -> Path:
        return Path(self.data_dir) / self.airports_file

    @property
    def routes_path(self) -> Path:
        return Path(self.data_dir) / self.routes_file


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (for tests).

    Raises:
        ValueError: If FLIGHT_NETWORK_PORT is not an integer.
    """
    if environ is not None:
        get = lambda name, default: environ.get(f"{ENV_PREFIX}{name}", default)  # noqa: E731
    else:
        get = _env

    defaults = Settings()
    port = get("PORT", str(defaults.port))
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {port!r}") from None

    return Settings(
        data_dir=get("DATA_DIR", defaults.data_dir),
        airlines_file=get("AIRLINES_FILE", defaults.airlines_file),
        airports_file=get("AIRPORTS_FILE", defaults.airports_file),
        routes_file=get("ROUTES_FILE", defaults.routes_file),
        static_dir=get("STATIC_DIR", defaults.static_dir),
        host=get("HOST", defaults.host),
        port=port_number,
        log_level=get("LOG_LEVEL", defaults.log_level).upper(),
    )
