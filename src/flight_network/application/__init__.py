"""
Application layer for the flight network.

Provides the public entry point: builds the store, search algorithm and
service from a data source.
"""

from src.flight_network.application.flight_network import FlightNetwork

__all__ = ["FlightNetwork"]
