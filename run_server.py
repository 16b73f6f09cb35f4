"""
Flight Network Server - Main Entry Point.

Loads the OpenFlights airlines, airports and routes tables into memory and
serves lookup, relationship and one-hop queries over HTTP.

Usage:
    python run_server.py [airlines.dat airports.dat routes.dat]
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

import uvicorn

from src.fastapi.network_api import create_app
from src.flight_network.application import FlightNetwork
from src.flight_network.config import Settings, load_settings

# Module-level logger
logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger to write timestamped lines to stdout.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG").
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve flight network reference data over HTTP.")
    parser.add_argument("files", nargs="*", metavar="FILE",
                        help="airlines, airports and routes files (all three, in that order)")
    parser.add_argument("--host", default=None, help="Bind address (default from settings)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default from settings)")
    args = parser.parse_args(argv)

    if args.files and len(args.files) != 3:
        parser.error("expected exactly three data files: airlines airports routes")
    return args


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Overlay command-line overrides on the environment settings."""
    overrides = {}
    if args.files:
        # Explicit paths are used as given, not joined to the data dir
        overrides.update(
            data_dir="",
            airlines_file=args.files[0],
            airports_file=args.files[1],
            routes_file=args.files[2],
        )
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    return dataclasses.replace(settings, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = apply_args(load_settings(), args)
    setup_logging(settings.log_level)

    try:
        network = FlightNetwork.from_settings(settings)
    except FileNotFoundError as e:
        logger.error(f"Error loading data files: {e}")
        return 1

    app = create_app(network=network, settings=settings)
    logger.info(f"Serving on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
