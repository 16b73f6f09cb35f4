"""
Tests for the route relationship aggregators.
"""

from src.flight_network.schemas.entities import Route
from src.flight_network.services.route_stats import (
    count_routes_by_airline,
    count_routes_by_airport,
    rank_counts,
)

ROUTES = [
    Route(airline_id=1, source_id=10, destination_id=20),
    Route(airline_id=1, source_id=20, destination_id=30),
    Route(airline_id=2, source_id=10, destination_id=40),
    Route(airline_id=2, source_id=40, destination_id=30, stops=1),
    Route(airline_id=1, source_id=10, destination_id=10),
]


class TestCountRoutesByAirline:
    """Tests for count_routes_by_airline."""

    def test_counts_both_endpoints(self):
        counts = count_routes_by_airline(ROUTES, 1)
        # The 10 -> 10 route adds one for each endpoint
        assert counts == {10: 3, 20: 2, 30: 1}

    def test_total_is_twice_route_count(self):
        counts = count_routes_by_airline(ROUTES, 2)
        operated = sum(1 for r in ROUTES if r.airline_id == 2)
        assert sum(counts.values()) == 2 * operated

    def test_insertion_order_follows_scan(self):
        assert list(count_routes_by_airline(ROUTES, 2)) == [10, 40, 30]

    def test_unknown_airline_is_empty(self):
        assert count_routes_by_airline(ROUTES, 404) == {}


class TestCountRoutesByAirport:
    """Tests for count_routes_by_airport."""

    def test_counts_routes_touching_airport(self):
        assert count_routes_by_airport(ROUTES, 30) == {1: 1, 2: 1}

    def test_self_loop_counted_once(self):
        assert count_routes_by_airport(ROUTES, 10) == {1: 2, 2: 1}

    def test_untouched_airport_is_empty(self):
        assert count_routes_by_airport(ROUTES, 999) == {}


class TestRankCounts:
    """Tests for rank_counts."""

    def test_descending_by_count(self):
        assert rank_counts({1: 1, 2: 5, 3: 3}) == [(2, 5), (3, 3), (1, 1)]

    def test_ties_keep_scan_order(self):
        assert rank_counts({9: 2, 4: 2, 7: 2}) == [(9, 2), (4, 2), (7, 2)]

    def test_empty(self):
        assert rank_counts({}) == []
