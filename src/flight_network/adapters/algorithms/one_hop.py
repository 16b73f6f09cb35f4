"""
One-Hop Itinerary Finder - two-leg connection search.

Walks the adjacency index exactly two levels deep from the source
airport, keeps zero-stop legs that meet the destination, then computes
all leg distances in one vectorized haversine call and ranks by total.
"""

import logging
from typing import List, Tuple

import numpy as np

from src.flight_network.adapters.repositories.network_store import (
    FlightNetworkGraph,
)
from src.flight_network.exceptions import NotFoundError
from src.flight_network.geo import haversine_miles
from src.flight_network.ports.itinerary_finder import ItineraryFinder
from src.flight_network.schemas.entities import Airport, Route
from src.flight_network.schemas.itinerary import OneHopItinerary

logger = logging.getLogger(__name__)

Candidate = Tuple[Route, Route, Airport]


class OneHopItineraryFinder(ItineraryFinder):
    """
    Zero-stop + zero-stop connection search through one intermediate.

    Cost is bounded by |outbound(source)| x max |outbound(via)|; the
    search never looks past the second hop. Ties on total distance keep
    discovery order (first leg order, then second leg order).
    """

    @property
    def name(self) -> str:
        """Algorithm identifier."""
        return "One-Hop Connection Search"

    def find_itineraries(
        self,
        graph: FlightNetworkGraph,
        source_id: int,
        destination_id: int,
    ) -> List[OneHopItinerary]:
        """
        Enumerate and rank every one-hop itinerary from source to destination.

        A source equal to the destination is searched like any other pair;
        loops back to the origin are legal results.

        Args:
            graph: Network graph (caller holds the read lock).
            source_id: Origin airport ID.
            destination_id: Destination airport ID.

        Returns:
            Itineraries sorted ascending by total miles. Empty if none.

        Raises:
            NotFoundError: If either endpoint is not a known airport.
        """
        source = graph.get_airport(source_id)
        if source is None:
            raise NotFoundError("airport", source_id)
        destination = graph.get_airport(destination_id)
        if destination is None:
            raise NotFoundError("airport", destination_id)

        candidates = self._enumerate(graph, source_id, destination_id)
        if not candidates:
            return []

        via_lat = np.array([via.latitude for _, _, via in candidates], dtype=float)
        via_lon = np.array([via.longitude for _, _, via in candidates], dtype=float)

        leg1 = haversine_miles(source.latitude, source.longitude, via_lat, via_lon)
        leg2 = haversine_miles(via_lat, via_lon, destination.latitude, destination.longitude)

        # Stable sort keeps discovery order between equal totals
        order = np.argsort(leg1 + leg2, kind="stable")

        results: List[OneHopItinerary] = []
        for i in order:
            first_leg, second_leg, via = candidates[i]
            results.append(
                OneHopItinerary(
                    via=via,
                    leg1_miles=float(leg1[i]),
                    leg2_miles=float(leg2[i]),
                    first_leg=first_leg,
                    second_leg=second_leg,
                    airline1=graph.get_airline(first_leg.airline_id),
                    airline2=graph.get_airline(second_leg.airline_id),
                )
            )
        return results

    @staticmethod
    def _enumerate(
        graph: FlightNetworkGraph,
        source_id: int,
        destination_id: int,
    ) -> List[Candidate]:
        """Collect (first leg, second leg, via airport) in discovery order."""
        candidates: List[Candidate] = []
        dangling = 0

        for first_leg in graph.outbound_routes(source_id):
            if not first_leg.is_direct:
                continue

            via_id = first_leg.destination_id
            via = graph.get_airport(via_id)
            if via is None:
                dangling += 1
                continue

            for second_leg in graph.outbound_routes(via_id):
                if second_leg.is_direct and second_leg.destination_id == destination_id:
                    candidates.append((first_leg, second_leg, via))

        if dangling:
            logger.debug(
                "Skipped %d first legs from airport %d with unknown intermediate",
                dangling,
                source_id,
            )
        return candidates
