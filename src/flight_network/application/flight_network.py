"""
FlightNetwork - Public entry point for the reference network.

Acts as a Facade/Factory: loads the three tables once, builds the shared
store and search algorithm, and hands out the NetworkService that the
HTTP layer calls.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Union

from src.flight_network.adapters.algorithms.one_hop import OneHopItineraryFinder
from src.flight_network.adapters.data_providers.openflights_provider import (
    OpenFlightsDataProvider,
)
from src.flight_network.adapters.repositories.network_store import NetworkStore
from src.flight_network.config import Settings
from src.flight_network.ports.itinerary_finder import ItineraryFinder
from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.services.network_service import NetworkService

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "data"


class FlightNetwork:
    """
    Public API for the flight network.

    Example usage:
        >>> network = FlightNetwork(data_dir="data")
        >>> service = network.service
        >>> lhr = service.lookup_airport_by_iata("LHR")
        >>> jfk = service.lookup_airport_by_iata("JFK")
        >>> for itinerary in service.one_hop_itineraries(lhr.id, jfk.id)[:3]:
        ...     print(itinerary.via.iata, round(itinerary.total_miles))

    Attributes:
        _store: Shared network store.
        _service: Service wrapping the store and finder.
    """

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        data_provider: Optional[NetworkDataProvider] = None,
        finder: Optional[ItineraryFinder] = None,
    ) -> None:
        """
        Load the network with optional custom dependencies.

        Args:
            data_dir: Directory with airlines.dat, airports.dat, routes.dat.
                Ignored when data_provider is given.
            data_provider: Custom data source. If None, reads OpenFlights
                files from data_dir.
            finder: Custom itinerary algorithm. If None, uses
                OneHopItineraryFinder.

        Raises:
            FileNotFoundError: If a data file is missing.
        """
        if data_provider is None:
            data_provider = OpenFlightsDataProvider(data_dir or DEFAULT_DATA_DIR)

        start_time = time.perf_counter()
        self._store = NetworkStore.from_provider(data_provider)
        self._finder = finder if finder is not None else OneHopItineraryFinder()
        self._service = NetworkService(store=self._store, finder=self._finder)

        logger.info(
            "FlightNetwork ready in %.1fms with %s algorithm",
            (time.perf_counter() - start_time) * 1000,
            self._finder.name,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FlightNetwork":
        """Build from configured file locations."""
        provider = OpenFlightsDataProvider(
            airlines_path=settings.airlines_path,
            airports_path=settings.airports_path,
            routes_path=settings.routes_path,
        )
        return cls(data_provider=provider)

    @property
    def service(self) -> NetworkService:
        """Service used by request handlers."""
        return self._service

    @property
    def store(self) -> NetworkStore:
        return self._store

    @property
    def route_count(self) -> int:
        """Current number of routes, including runtime additions."""
        return self._store.route_count
