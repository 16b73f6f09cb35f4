"""
Schema definitions for the flight network.

Pandera-validated DataFrames as the ingestion contracts, frozen
dataclasses as the in-memory records and query results.
"""

from .entities import (
    Airline,
    AirlineDataFrame,
    AirlineSchema,
    Airport,
    AirportDataFrame,
    AirportSchema,
    Route,
    RouteDataFrame,
    RouteSchema,
    normalize_iata,
)
from .itinerary import AirlineRouteCount, AirportRouteCount, OneHopItinerary

__all__ = [
    # Records
    "Airline",
    "Airport",
    "Route",
    "normalize_iata",
    # Ingestion schemas
    "AirlineSchema",
    "AirportSchema",
    "RouteSchema",
    "AirlineDataFrame",
    "AirportDataFrame",
    "RouteDataFrame",
    # Query results
    "OneHopItinerary",
    "AirportRouteCount",
    "AirlineRouteCount",
]
