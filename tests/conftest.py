"""
Shared fixtures for flight network tests.

The sample network is small but exercises the awkward cases: a route to
an airport that does not exist, a route from one, an airline ID with no
airline record, an airline without an IATA code, and a one-stop route.
"""

from typing import Callable, Iterable, Optional

import pandas as pd
import pytest

from src.flight_network.adapters.algorithms.one_hop import OneHopItineraryFinder
from src.flight_network.adapters.data_providers.frame_provider import FrameDataProvider
from src.flight_network.adapters.repositories.network_store import (
    AdjacencyIndex,
    FlightNetworkGraph,
    NetworkStore,
)
from src.flight_network.schemas.entities import Airline, Airport, Route
from src.flight_network.services.network_service import NetworkService

LHR, JFK, LAX, CDG = 10, 20, 30, 40
MISSING_AIRPORT = 999
AMERICAN, BRITISH, GHOST = 1, 2, 3
MISSING_AIRLINE = 99


@pytest.fixture
def airlines_df() -> pd.DataFrame:
    """Airlines table; GHOST has no IATA code."""
    return pd.DataFrame(
        {
            "id": [AMERICAN, BRITISH, GHOST],
            "iata": ["AA", "BA", ""],
            "name": ["American Airlines", "British Airways", "Ghost Air"],
            "country": ["United States", "United Kingdom", "Nowhere"],
            "active": [True, True, False],
        }
    )


@pytest.fixture
def airports_df() -> pd.DataFrame:
    """Airports table with real coordinates."""
    return pd.DataFrame(
        {
            "id": [LHR, JFK, LAX, CDG],
            "iata": ["LHR", "JFK", "LAX", "CDG"],
            "name": [
                "London Heathrow Airport",
                "John F Kennedy International Airport",
                "Los Angeles International Airport",
                "Charles de Gaulle International Airport",
            ],
            "city": ["London", "New York", "Los Angeles", "Paris"],
            "country": ["United Kingdom", "United States", "United States", "France"],
            "latitude": [51.4706, 40.639801, 33.942501, 49.012798],
            "longitude": [-0.461941, -73.7789, -118.407997, 2.55],
        }
    )


@pytest.fixture
def routes_df() -> pd.DataFrame:
    """
    Routes table, in insertion order:

    0: AA  LHR -> JFK
    1: AA  JFK -> LAX
    2: BA  LHR -> CDG
    3: BA  CDG -> LAX
    4: BA  JFK -> LAX (1 stop)
    5: ??  JFK -> LAX (airline 99 unknown)
    6: AA  LHR -> 999 (unknown airport)
    7: GH  999 -> LAX (unknown airport)
    """
    return pd.DataFrame(
        {
            "airline_id": [AMERICAN, AMERICAN, BRITISH, BRITISH, BRITISH, MISSING_AIRLINE, AMERICAN, GHOST],
            "source_id": [LHR, JFK, LHR, CDG, JFK, JFK, LHR, MISSING_AIRPORT],
            "destination_id": [JFK, LAX, CDG, LAX, LAX, LAX, MISSING_AIRPORT, LAX],
            "stops": [0, 0, 0, 0, 1, 0, 0, 0],
        }
    )


@pytest.fixture
def provider(airlines_df, airports_df, routes_df) -> FrameDataProvider:
    return FrameDataProvider(airlines=airlines_df, airports=airports_df, routes=routes_df)


@pytest.fixture
def store(provider) -> NetworkStore:
    return NetworkStore.from_provider(provider)


@pytest.fixture
def service(store) -> NetworkService:
    return NetworkService(store=store, finder=OneHopItineraryFinder())


@pytest.fixture
def build_graph() -> Callable[..., FlightNetworkGraph]:
    """Factory building a graph straight from record lists."""

    def _build(
        airports: Iterable[Airport] = (),
        routes: Iterable[Route] = (),
        airlines: Optional[Iterable[Airline]] = None,
    ) -> FlightNetworkGraph:
        graph = FlightNetworkGraph.empty()
        for airline in airlines or ():
            graph.airlines.insert(airline)
        for airport in airports:
            graph.airports.insert(airport)
        graph.adjacency = AdjacencyIndex.from_routes(list(routes))
        return graph

    return _build
