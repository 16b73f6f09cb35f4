"""
Repository adapters for the in-memory flight network.
"""

from src.flight_network.adapters.repositories.network_store import (
    AdjacencyIndex,
    EntityTable,
    FlightNetworkGraph,
    NetworkStore,
    OutboundRoutes,
    ReadWriteLock,
    build_source_buckets,
)

__all__ = [
    "AdjacencyIndex",
    "EntityTable",
    "FlightNetworkGraph",
    "NetworkStore",
    "OutboundRoutes",
    "ReadWriteLock",
    "build_source_buckets",
]
