"""
Query result types.

Immutable results handed from the search engine and aggregators to the
service layer and on to the HTTP serializers.
"""

from dataclasses import dataclass
from typing import Optional

from src.flight_network.schemas.entities import Airline, Airport, Route


@dataclass(frozen=True)
class OneHopItinerary:
    """
    Two zero-stop legs chained through an intermediate airport.

    Airlines are None when the leg's airline ID does not resolve; the
    itinerary is still valid in that case.
    """

    via: Airport
    leg1_miles: float
    leg2_miles: float
    first_leg: Route
    second_leg: Route
    airline1: Optional[Airline] = None
    airline2: Optional[Airline] = None

    @property
    def total_miles(self) -> float:
        """Sum of both leg distances."""
        return self.leg1_miles + self.leg2_miles


@dataclass(frozen=True)
class AirportRouteCount:
    """An airport served by an airline and how many route endpoints hit it."""

    airport: Airport
    route_count: int


@dataclass(frozen=True)
class AirlineRouteCount:
    """An airline serving an airport and how many of its routes touch it."""

    airline: Airline
    route_count: int
