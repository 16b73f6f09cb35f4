"""
Tests for OneHopItineraryFinder.

Tests cover:
- Single connection through one intermediate airport
- Stops filter on either leg
- Multiple second legs and ranking by total distance
- Dangling intermediates and unknown airlines
- Unknown endpoints
"""

import pytest

from src.flight_network.adapters.algorithms.one_hop import OneHopItineraryFinder
from src.flight_network.exceptions import NotFoundError
from src.flight_network.geo import great_circle_miles
from src.flight_network.schemas.entities import Airline, Airport, Route


@pytest.fixture
def finder() -> OneHopItineraryFinder:
    return OneHopItineraryFinder()


@pytest.fixture
def airports() -> list:
    return [
        Airport(id=10, iata="WAW", latitude=52.1657, longitude=20.9671),
        Airport(id=20, iata="FRA", latitude=50.0333, longitude=8.5706),
        Airport(id=30, iata="LIS", latitude=38.7813, longitude=-9.1359),
        Airport(id=40, iata="MUC", latitude=48.3538, longitude=11.7861),
    ]


@pytest.fixture
def airlines() -> list:
    return [
        Airline(id=1, iata="LO", name="LOT Polish Airlines"),
        Airline(id=2, iata="LH", name="Lufthansa"),
        Airline(id=3, iata="TP", name="TAP Portugal"),
    ]


class TestFinderBasics:
    """Tests for the finder identity and endpoint validation."""

    def test_name(self, finder: OneHopItineraryFinder):
        assert finder.name == "One-Hop Connection Search"

    def test_unknown_source_raises(self, finder, build_graph, airports):
        graph = build_graph(airports=airports)
        with pytest.raises(NotFoundError):
            finder.find_itineraries(graph, 777, 30)

    def test_unknown_destination_raises(self, finder, build_graph, airports):
        graph = build_graph(airports=airports)
        with pytest.raises(NotFoundError):
            finder.find_itineraries(graph, 10, 777)

    def test_no_routes_yields_empty(self, finder, build_graph, airports):
        graph = build_graph(airports=airports)
        assert finder.find_itineraries(graph, 10, 30) == []


class TestSingleConnection:
    """One first leg meeting one second leg."""

    def test_one_itinerary_via_intermediate(self, finder, build_graph, airports, airlines):
        graph = build_graph(
            airports=airports,
            airlines=airlines,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=2, source_id=20, destination_id=30),
            ],
        )

        results = finder.find_itineraries(graph, 10, 30)

        assert len(results) == 1
        itinerary = results[0]
        assert itinerary.via.id == 20
        assert itinerary.airline1.iata == "LO"
        assert itinerary.airline2.iata == "LH"
        assert itinerary.leg1_miles == pytest.approx(great_circle_miles(airports[0], airports[1]))
        assert itinerary.leg2_miles == pytest.approx(great_circle_miles(airports[1], airports[2]))
        assert itinerary.total_miles == pytest.approx(itinerary.leg1_miles + itinerary.leg2_miles)

    def test_direct_route_is_not_an_itinerary(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[Route(airline_id=1, source_id=10, destination_id=30)],
        )
        assert finder.find_itineraries(graph, 10, 30) == []

    def test_stopping_second_leg_excluded(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=2, source_id=20, destination_id=30, stops=1),
            ],
        )
        assert finder.find_itineraries(graph, 10, 30) == []

    def test_stopping_first_leg_excluded(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20, stops=2),
                Route(airline_id=2, source_id=20, destination_id=30),
            ],
        )
        assert finder.find_itineraries(graph, 10, 30) == []

    def test_three_leg_path_not_found(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=1, source_id=20, destination_id=40),
                Route(airline_id=1, source_id=40, destination_id=30),
            ],
        )
        assert finder.find_itineraries(graph, 10, 30) == []


class TestMultipleConnections:
    """Several candidates: enumeration order and ranking."""

    def test_parallel_second_legs_keep_enumeration_order(self, finder, build_graph, airports, airlines):
        graph = build_graph(
            airports=airports,
            airlines=airlines,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=2, source_id=20, destination_id=30),
                Route(airline_id=3, source_id=20, destination_id=30),
            ],
        )

        results = finder.find_itineraries(graph, 10, 30)

        assert [r.second_leg.airline_id for r in results] == [2, 3]
        assert results[0].total_miles == results[1].total_miles

    def test_sorted_ascending_by_total(self, finder, build_graph, airports):
        # MUC first in insertion order but longer than FRA for WAW -> LIS
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=40),
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=1, source_id=40, destination_id=30),
                Route(airline_id=1, source_id=20, destination_id=30),
            ],
        )

        results = finder.find_itineraries(graph, 10, 30)
        totals = [r.total_miles for r in results]

        assert len(results) == 2
        assert totals == sorted(totals)
        assert {r.via.id for r in results} == {20, 40}

    def test_same_source_and_destination(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=2, source_id=20, destination_id=10),
            ],
        )

        results = finder.find_itineraries(graph, 10, 10)

        assert len(results) == 1
        assert results[0].via.id == 20
        assert results[0].leg1_miles == pytest.approx(results[0].leg2_miles)


class TestDanglingReferences:
    """Routes pointing at records that are not in the store."""

    def test_unknown_intermediate_skipped(self, finder, build_graph, airports):
        graph = build_graph(
            airports=airports,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=555),
                Route(airline_id=1, source_id=555, destination_id=30),
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=1, source_id=20, destination_id=30),
            ],
        )

        results = finder.find_itineraries(graph, 10, 30)

        assert [r.via.id for r in results] == [20]

    def test_unknown_airline_yields_none(self, finder, build_graph, airports, airlines):
        graph = build_graph(
            airports=airports,
            airlines=airlines,
            routes=[
                Route(airline_id=1, source_id=10, destination_id=20),
                Route(airline_id=404, source_id=20, destination_id=30),
            ],
        )

        (itinerary,) = finder.find_itineraries(graph, 10, 30)

        assert itinerary.airline1.id == 1
        assert itinerary.airline2 is None
        assert itinerary.second_leg.airline_id == 404


class TestSharedSampleNetwork:
    """The one-hop search over the shared sample network."""

    def test_lhr_to_lax(self, finder, store):
        with store.read_view() as graph:
            results = finder.find_itineraries(graph, 10, 30)

        # Via JFK: AA leg and the unknown-airline leg; via CDG: BA leg
        routes = [(r.via.iata, r.second_leg.airline_id) for r in results]
        assert sorted(routes) == [("CDG", 2), ("JFK", 1), ("JFK", 99)]
        jfk = [r for r in results if r.via.iata == "JFK"]
        assert [r.second_leg.airline_id for r in jfk] == [1, 99]
