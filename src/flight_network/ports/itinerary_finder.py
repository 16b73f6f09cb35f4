"""
Itinerary Finder port interface.

Defines the abstract contract for connection search algorithms.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from src.flight_network.adapters.repositories.network_store import (
        FlightNetworkGraph,
    )
    from src.flight_network.schemas.itinerary import OneHopItinerary


class ItineraryFinder(ABC):
    """
    Abstract interface for itinerary search algorithms.

    Finders receive the whole FlightNetworkGraph and read it through its
    adjacency index. Callers hold the store's read lock for the duration
    of the call; finders never mutate the graph.

    Implementations:
    - OneHopItineraryFinder: zero-stop + zero-stop connections
    """

    @abstractmethod
    def find_itineraries(
        self,
        graph: FlightNetworkGraph,
        source_id: int,
        destination_id: int,
    ) -> List[OneHopItinerary]:
        """
        Find itineraries between two airports.

        Args:
            graph: Network graph with entity tables and adjacency index.
            source_id: Origin airport ID (must resolve in the graph).
            destination_id: Destination airport ID (must resolve).

        Returns:
            Itineraries sorted ascending by total distance.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Algorithm identifier."""
        ...
