"""
Route relationship aggregators.

Linear scans over the current route table that produce frequency
tables, ranked by count. No incremental state is kept, so results always
reflect the latest writes.
"""

from typing import Dict, Iterable, List, Tuple

from src.flight_network.schemas.entities import Route


def count_routes_by_airline(routes: Iterable[Route], airline_id: int) -> Dict[int, int]:
    """
    Count route endpoints per airport for one airline.

    Each matching route adds one to its source airport and one to its
    destination airport, so the counts sum to twice the number of routes
    the airline operates.

    Returns:
        Airport ID -> count, in order of first appearance in the scan.
    """
    counts: Dict[int, int] = {}
    for route in routes:
        if route.airline_id != airline_id:
            continue
        counts[route.source_id] = counts.get(route.source_id, 0) + 1
        counts[route.destination_id] = counts.get(route.destination_id, 0) + 1
    return counts


def count_routes_by_airport(routes: Iterable[Route], airport_id: int) -> Dict[int, int]:
    """
    Count routes per airline touching one airport.

    A route counts once when the airport is its source, its destination,
    or both.

    Returns:
        Airline ID -> count, in order of first appearance in the scan.
    """
    counts: Dict[int, int] = {}
    for route in routes:
        if route.source_id == airport_id or route.destination_id == airport_id:
            counts[route.airline_id] = counts.get(route.airline_id, 0) + 1
    return counts


def rank_counts(counts: Dict[int, int]) -> List[Tuple[int, int]]:
    """
    Order (key, count) pairs by descending count.

    Python's sort is stable, so equal counts keep scan order.

    Example:
        >>> rank_counts({7: 1, 3: 4, 9: 1, 5: 4})
        [(3, 4), (5, 4), (7, 1), (9, 1)]
    """
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)
