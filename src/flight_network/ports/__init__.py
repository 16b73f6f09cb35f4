"""
Port interfaces for the flight network.

Ports define the abstract interfaces the domain layer uses to talk to
data sources and search algorithms (Ports and Adapters).
"""

from src.flight_network.ports.itinerary_finder import ItineraryFinder
from src.flight_network.ports.network_data_provider import NetworkDataProvider

__all__ = [
    "ItineraryFinder",
    "NetworkDataProvider",
]
