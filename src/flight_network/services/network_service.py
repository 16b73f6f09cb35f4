"""
Network Service - Domain orchestrator for reference queries.

Coordinates the interaction between:
- NetworkStore (shared in-memory network behind one lock)
- ItineraryFinder (one-hop search algorithm)
- route_stats (relationship aggregators)
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import TYPE_CHECKING, List, Tuple, TypeVar

from src.flight_network.exceptions import InvalidReferenceError, NotFoundError
from src.flight_network.schemas.entities import Airline, Airport, Route
from src.flight_network.schemas.itinerary import (
    AirlineRouteCount,
    AirportRouteCount,
    OneHopItinerary,
)
from src.flight_network.services.route_stats import (
    count_routes_by_airline,
    count_routes_by_airport,
    rank_counts,
)

if TYPE_CHECKING:
    from src.flight_network.adapters.repositories.network_store import NetworkStore
    from src.flight_network.ports.itinerary_finder import ItineraryFinder

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", Airline, Airport)

# Free-text fields trimmed on every write
_TEXT_FIELDS = ("name", "country", "city")


def _trim_fields(fields: dict) -> dict:
    return {
        key: value.strip() if key in _TEXT_FIELDS and isinstance(value, str) else value
        for key, value in fields.items()
    }


def _trim_record(record: RecordT) -> RecordT:
    return dataclasses.replace(record, **_trim_fields(dataclasses.asdict(record)))


class NetworkService:
    """
    Domain service behind every HTTP operation.

    Each public method takes the store lock exactly once: the read side
    for lookups, listings, aggregation and search, the write side for
    inserts and updates. Multi-step reads therefore see one consistent
    network.

    Attributes:
        _store: Shared network store.
        _finder: Itinerary search algorithm.
    """

    def __init__(self, store: NetworkStore, finder: ItineraryFinder) -> None:
        self._store = store
        self._finder = finder

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def lookup_airline_by_iata(self, code: str) -> Airline:
        """
        Find an airline by IATA code (case-insensitive).

        Raises:
            NotFoundError: If no airline carries the code.
        """
        airline = self._store.get_airline_by_iata(code)
        if airline is None:
            raise NotFoundError("airline", code, "IATA")
        return airline

    def lookup_airport_by_iata(self, code: str) -> Airport:
        """
        Find an airport by IATA code (case-insensitive).

        Raises:
            NotFoundError: If no airport carries the code.
        """
        airport = self._store.get_airport_by_iata(code)
        if airport is None:
            raise NotFoundError("airport", code, "IATA")
        return airport

    def all_airlines_sorted_by_iata(self) -> List[Airline]:
        with self._store.read_view() as graph:
            return graph.airlines.sorted_by_iata()

    def all_airports_sorted_by_iata(self) -> List[Airport]:
        with self._store.read_view() as graph:
            return graph.airports.sorted_by_iata()

    # -------------------------------------------------------------------------
    # Relationship aggregation
    # -------------------------------------------------------------------------

    def airline_served_airports(self, airline_id: int) -> List[AirportRouteCount]:
        """
        Airports an airline's routes touch, with endpoint counts.

        Airports missing from the store are counted but not returned.

        Returns:
            Results in descending count order; ties keep scan order.
        """
        with self._store.read_view() as graph:
            counts = count_routes_by_airline(graph.iter_routes(), airline_id)
            results = []
            for airport_id, count in rank_counts(counts):
                airport = graph.get_airport(airport_id)
                if airport is not None:
                    results.append(AirportRouteCount(airport=airport, route_count=count))
        return results

    def airport_serving_airlines(self, airport_id: int) -> List[AirlineRouteCount]:
        """
        Airlines with routes touching an airport, with route counts.

        Airlines missing from the store are counted but not returned.
        """
        with self._store.read_view() as graph:
            counts = count_routes_by_airport(graph.iter_routes(), airport_id)
            results = []
            for airline_id, count in rank_counts(counts):
                airline = graph.get_airline(airline_id)
                if airline is not None:
                    results.append(AirlineRouteCount(airline=airline, route_count=count))
        return results

    def airline_routes_by_iata(self, code: str) -> Tuple[Airline, List[AirportRouteCount]]:
        """Resolve an airline by IATA code and aggregate its airports."""
        airline = self.lookup_airline_by_iata(code)
        return airline, self.airline_served_airports(airline.id)

    def airport_routes_by_iata(self, code: str) -> Tuple[Airport, List[AirlineRouteCount]]:
        """Resolve an airport by IATA code and aggregate its airlines."""
        airport = self.lookup_airport_by_iata(code)
        return airport, self.airport_serving_airlines(airport.id)

    # -------------------------------------------------------------------------
    # One-hop search
    # -------------------------------------------------------------------------

    def one_hop_itineraries(self, source_id: int, destination_id: int) -> List[OneHopItinerary]:
        """
        Ranked zero-stop + zero-stop itineraries between two airports.

        Raises:
            NotFoundError: If either endpoint is not a known airport.
        """
        start_time = time.perf_counter()

        with self._store.read_view() as graph:
            if graph.get_airport(source_id) is None:
                raise NotFoundError("airport", source_id)
            if graph.get_airport(destination_id) is None:
                raise NotFoundError("airport", destination_id)
            results = self._finder.find_itineraries(graph, source_id, destination_id)

        logger.debug(
            "One-hop search %d -> %d: %d itineraries in %.3fms",
            source_id,
            destination_id,
            len(results),
            (time.perf_counter() - start_time) * 1000,
        )
        return results

    def one_hop_by_iata(
        self, source_code: str, destination_code: str
    ) -> Tuple[Airport, Airport, List[OneHopItinerary]]:
        """Resolve both endpoints by IATA code, then run the one-hop search."""
        source = self.lookup_airport_by_iata(source_code)
        destination = self.lookup_airport_by_iata(destination_code)
        return source, destination, self.one_hop_itineraries(source.id, destination.id)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_airline(self, airline: Airline) -> Airline:
        """
        Add a new airline.

        Raises:
            DuplicateKeyError: If the ID already exists.
        """
        stored = self._store.insert_airline(_trim_record(airline))
        logger.info(f"Airline {stored.id} ({stored.iata or '-'}) added")
        return stored

    def insert_airport(self, airport: Airport) -> Airport:
        """
        Add a new airport.

        Raises:
            DuplicateKeyError: If the ID already exists.
        """
        stored = self._store.insert_airport(_trim_record(airport))
        logger.info(f"Airport {stored.id} ({stored.iata or '-'}) added")
        return stored

    def update_airline(self, airline_id: int, **fields: object) -> Airline:
        """
        Overwrite the supplied fields of an airline.

        Raises:
            NotFoundError: If the ID is unknown.
        """
        updated = self._store.update_airline(airline_id, **_trim_fields(fields))
        logger.info(f"Airline {airline_id} updated: {sorted(fields)}")
        return updated

    def update_airport(self, airport_id: int, **fields: object) -> Airport:
        """
        Overwrite the supplied fields of an airport.

        Raises:
            NotFoundError: If the ID is unknown.
        """
        updated = self._store.update_airport(airport_id, **_trim_fields(fields))
        logger.info(f"Airport {airport_id} updated: {sorted(fields)}")
        return updated

    def insert_route(self, route: Route) -> Route:
        """
        Add a route after checking its airline and both endpoints exist.

        The check and the append happen under one write lock, so a
        concurrent search sees either no trace of the route or the route
        in both the table and its bucket.

        Raises:
            InvalidReferenceError: For an unknown airline_id, src_id or
                dst_id, checked in that order.
        """
        with self._store.write_view() as graph:
            if route.airline_id not in graph.airlines:
                raise InvalidReferenceError("airline_id", route.airline_id)
            if route.source_id not in graph.airports:
                raise InvalidReferenceError("src_id", route.source_id)
            if route.destination_id not in graph.airports:
                raise InvalidReferenceError("dst_id", route.destination_id)
            graph.adjacency.add_route(route)

        logger.info(
            f"Route added: airline {route.airline_id}, "
            f"{route.source_id} -> {route.destination_id}, {route.stops} stops"
        )
        return route

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @property
    def algorithm_name(self) -> str:
        """Name of the underlying itinerary algorithm."""
        return self._finder.name
