"""
Network Store - In-Memory Reference Graph Infrastructure.

Holds the whole flight network in memory:
- EntityTable: record arena with a primary ID map and an IATA index
- AdjacencyIndex: route table plus per-source-airport buckets
- FlightNetworkGraph: the tables and index that algorithms read
- NetworkStore: the graph behind a single read-write lock
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Sequence
from contextlib import contextmanager
from typing import (
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    TypeVar,
    Union,
    overload,
)

import numpy as np
import pandas as pd

from src.flight_network.exceptions import DuplicateKeyError, NotFoundError
from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.schemas.entities import (
    Airline,
    Airport,
    Route,
    normalize_iata,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", Airline, Airport)


# =============================================================================
# ENTITY TABLE: Arena of records with primary and IATA indexes
# =============================================================================


class EntityTable(Generic[RecordT]):
    """
    Dense arena of records with O(1) lookup by ID and by IATA code.

    Records are frozen dataclasses; updates replace the record in its
    arena slot so positions never move. The IATA index holds at most one
    slot per code and the most recent write of a code wins.

    Attributes:
        entity: Entity name used in error messages ("airline", "airport").
    """

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._records: List[RecordT] = []
        self._by_id: Dict[int, int] = {}
        self._by_iata: Dict[str, int] = {}

    def insert(self, record: RecordT) -> RecordT:
        """
        Store a new record and index it.

        Args:
            record: Record to store. Its IATA code is normalized first.

        Returns:
            The stored (normalized) record.

        Raises:
            DuplicateKeyError: If the ID is already present.
        """
        if record.id in self._by_id:
            raise DuplicateKeyError(self.entity, record.id)

        record = dataclasses.replace(record, iata=normalize_iata(record.iata))
        slot = len(self._records)
        self._records.append(record)
        self._by_id[record.id] = slot
        if record.iata:
            self._by_iata[record.iata] = slot
        return record

    def update(self, record_id: int, **fields: object) -> RecordT:
        """
        Overwrite only the supplied fields of an existing record.

        When the IATA code changes, the old code stops resolving to this
        record and the new code (if non-empty) is indexed.

        Raises:
            NotFoundError: If no record has this ID.
            ValueError: If a field name is unknown or is the ID itself.
        """
        slot = self._by_id.get(record_id)
        if slot is None:
            raise NotFoundError(self.entity, record_id)

        current = self._records[slot]
        allowed = {f.name for f in dataclasses.fields(current)} - {"id"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(
                f"Unknown {self.entity} fields: {', '.join(sorted(unknown))}"
            )

        if "iata" in fields:
            fields["iata"] = normalize_iata(fields["iata"])  # type: ignore[arg-type]

        updated = dataclasses.replace(current, **fields)
        self._records[slot] = updated

        if updated.iata != current.iata:
            # Only drop the old mapping if a later insert has not taken it
            if current.iata and self._by_iata.get(current.iata) == slot:
                del self._by_iata[current.iata]
            if updated.iata:
                self._by_iata[updated.iata] = slot

        return updated

    def get_by_id(self, record_id: int) -> Optional[RecordT]:
        slot = self._by_id.get(record_id)
        return self._records[slot] if slot is not None else None

    def get_by_iata(self, code: str) -> Optional[RecordT]:
        """Case-insensitive IATA lookup; empty codes never resolve."""
        code = normalize_iata(code)
        if not code:
            return None
        slot = self._by_iata.get(code)
        return self._records[slot] if slot is not None else None

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._by_id

    def __iter__(self) -> Iterator[RecordT]:
        """Iterate records in insertion order."""
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def sorted_by_iata(self) -> List[RecordT]:
        """Records ordered by IATA code; ties keep insertion order."""
        return sorted(self._records, key=lambda r: r.iata)


# =============================================================================
# ADJACENCY INDEX: Route table with per-source buckets
# =============================================================================


class OutboundRoutes(Sequence):
    """
    Lazy, restartable view of the routes leaving one airport.

    Indexes into the shared route table through the airport's bucket of
    route positions; nothing is copied. Iterating twice yields the same
    routes in the same (insertion) order.
    """

    __slots__ = ("_routes", "_positions")

    def __init__(self, routes: List[Route], positions: Sequence[int]) -> None:
        self._routes = routes
        self._positions = positions

    @overload
    def __getitem__(self, i: int) -> Route: ...

    @overload
    def __getitem__(self, i: slice) -> List[Route]: ...

    def __getitem__(self, i: Union[int, slice]) -> Union[Route, List[Route]]:
        if isinstance(i, slice):
            return [self._routes[p] for p in self._positions[i]]
        return self._routes[self._positions[i]]

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Route]:
        for p in self._positions:
            yield self._routes[p]


_NO_POSITIONS: tuple = ()


def build_source_buckets(source_ids: np.ndarray) -> Dict[int, List[int]]:
    """
    Group route positions by source airport using VECTORIZED numpy ops.

    A stable argsort keeps positions within each bucket in their original
    (insertion) order, then bucket boundaries are found where the sorted
    source ID changes.

    Args:
        source_ids: Source airport ID per route, in route-table order.

    Returns:
        Dict mapping source airport ID to route positions in order.

    Example:
        >>> build_source_buckets(np.array([20, 10, 20, 30, 10]))
        {10: [1, 4], 20: [0, 2], 30: [3]}
    """
    if len(source_ids) == 0:
        return {}

    order = np.argsort(source_ids, kind="stable")
    sorted_ids = source_ids[order]

    change_mask = np.concatenate([[True], sorted_ids[1:] != sorted_ids[:-1]])
    change_indices = np.where(change_mask)[0]

    buckets: Dict[int, List[int]] = {}
    n = len(sorted_ids)
    num_boundaries = len(change_indices)
    for i in range(num_boundaries):
        start = int(change_indices[i])
        end = int(change_indices[i + 1]) if i + 1 < num_boundaries else n
        buckets[int(sorted_ids[start])] = order[start:end].tolist()

    return buckets


class AdjacencyIndex:
    """
    Global route table plus outbound buckets keyed by source airport ID.

    Every route lives in exactly one bucket (its source). No existence
    checks are made on airline or airport IDs here; dangling references
    are tolerated by the readers.
    """

    def __init__(self) -> None:
        self._routes: List[Route] = []
        self._by_source: Dict[int, List[int]] = {}

    @classmethod
    def from_routes(cls, routes: List[Route]) -> "AdjacencyIndex":
        """Bulk-build the index from routes in table order."""
        index = cls()
        index._routes = list(routes)
        source_ids = np.fromiter(
            (r.source_id for r in index._routes),
            dtype=np.int64,
            count=len(index._routes),
        )
        index._by_source = build_source_buckets(source_ids)
        return index

    def add_route(self, route: Route) -> Route:
        """Append a route to the table and to its source bucket."""
        position = len(self._routes)
        self._routes.append(route)
        self._by_source.setdefault(route.source_id, []).append(position)
        return route

    def outbound_routes(self, airport_id: int) -> OutboundRoutes:
        """Routes leaving airport_id in insertion order (empty if none)."""
        positions = self._by_source.get(airport_id, _NO_POSITIONS)
        return OutboundRoutes(self._routes, positions)

    def iter_routes(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def source_count(self) -> int:
        """Number of airports with at least one outbound route."""
        return len(self._by_source)


# =============================================================================
# FLIGHT NETWORK GRAPH: What algorithms and aggregators read
# =============================================================================


@dataclasses.dataclass
class FlightNetworkGraph:
    """
    The in-memory network: entity tables plus the adjacency index.

    Not thread-safe on its own. Reach it through NetworkStore, which
    guards every access with the store lock.

    Attributes:
        airlines: Airline table.
        airports: Airport table.
        adjacency: Route table and outbound buckets.
    """

    airlines: EntityTable[Airline]
    airports: EntityTable[Airport]
    adjacency: AdjacencyIndex

    @classmethod
    def empty(cls) -> "FlightNetworkGraph":
        return cls(
            airlines=EntityTable("airline"),
            airports=EntityTable("airport"),
            adjacency=AdjacencyIndex(),
        )

    @classmethod
    def from_frames(
        cls,
        airlines_df: pd.DataFrame,
        airports_df: pd.DataFrame,
        routes_df: pd.DataFrame,
    ) -> "FlightNetworkGraph":
        """
        Build a graph from validated ingestion frames.

        Rows with an ID already seen earlier in the same table are
        skipped with a warning; the first occurrence is kept.
        """
        graph = cls.empty()

        for row in airlines_df.itertuples(index=False):
            graph._ingest(
                graph.airlines,
                Airline(
                    id=int(row.id),
                    iata=str(row.iata),
                    name=str(row.name),
                    country=str(row.country),
                    active=bool(row.active),
                ),
            )

        for row in airports_df.itertuples(index=False):
            graph._ingest(
                graph.airports,
                Airport(
                    id=int(row.id),
                    iata=str(row.iata),
                    name=str(row.name),
                    city=str(row.city),
                    country=str(row.country),
                    latitude=float(row.latitude),
                    longitude=float(row.longitude),
                ),
            )

        routes = [
            Route(
                airline_id=int(airline_id),
                source_id=int(source_id),
                destination_id=int(destination_id),
                stops=int(stops),
            )
            for airline_id, source_id, destination_id, stops in zip(
                routes_df["airline_id"],
                routes_df["source_id"],
                routes_df["destination_id"],
                routes_df["stops"],
            )
        ]
        graph.adjacency = AdjacencyIndex.from_routes(routes)

        return graph

    @staticmethod
    def _ingest(table: EntityTable, record: Union[Airline, Airport]) -> None:
        try:
            table.insert(record)
        except DuplicateKeyError as e:
            logger.warning("Skipping ingested row: %s", e)

    def get_airline(self, airline_id: int) -> Optional[Airline]:
        return self.airlines.get_by_id(airline_id)

    def get_airport(self, airport_id: int) -> Optional[Airport]:
        return self.airports.get_by_id(airport_id)

    def outbound_routes(self, airport_id: int) -> OutboundRoutes:
        return self.adjacency.outbound_routes(airport_id)

    def iter_routes(self) -> Iterator[Route]:
        return self.adjacency.iter_routes()

    @property
    def route_count(self) -> int:
        return len(self.adjacency)


# =============================================================================
# READ-WRITE LOCK: Concurrent readers, exclusive writers
# =============================================================================


class ReadWriteLock:
    """
    Many readers or one writer, with writer preference.

    Once a writer is waiting, new readers queue behind it so a steady
    stream of searches cannot starve an add-route. Not reentrant: do not
    take the read side while already holding either side.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()


# =============================================================================
# NETWORK STORE: The process-wide dataset behind one lock
# =============================================================================


class NetworkStore:
    """
    Process-wide flight network guarded by a single read-write lock.

    Lookups, searches and aggregation scans run concurrently under the
    read side. Inserts, updates and add-route run alone under the write
    side, so a reader never sees a route in the table but not yet in its
    bucket.

    Usage:
        >>> store = NetworkStore.from_provider(OpenFlightsDataProvider("data"))
        >>> with store.read_view() as graph:
        ...     routes = list(graph.outbound_routes(3682))
    """

    def __init__(self, graph: Optional[FlightNetworkGraph] = None) -> None:
        self._graph = graph if graph is not None else FlightNetworkGraph.empty()
        self._lock = ReadWriteLock()

    @classmethod
    def from_provider(cls, provider: NetworkDataProvider) -> "NetworkStore":
        """Load all three tables from a provider and build the store."""
        graph = FlightNetworkGraph.from_frames(
            provider.get_airlines_df(),
            provider.get_airports_df(),
            provider.get_routes_df(),
        )
        logger.info(
            "Network loaded from %s: %d airlines, %d airports, %d routes "
            "(%d airports with departures)",
            provider.name,
            len(graph.airlines),
            len(graph.airports),
            graph.route_count,
            graph.adjacency.source_count,
        )
        return cls(graph)

    @contextmanager
    def read_view(self) -> Iterator[FlightNetworkGraph]:
        """Hold the read lock and expose the graph for a multi-step read."""
        with self._lock.read_locked():
            yield self._graph

    # --- Single lookups ---

    def get_airline(self, airline_id: int) -> Optional[Airline]:
        with self._lock.read_locked():
            return self._graph.airlines.get_by_id(airline_id)

    def get_airport(self, airport_id: int) -> Optional[Airport]:
        with self._lock.read_locked():
            return self._graph.airports.get_by_id(airport_id)

    def get_airline_by_iata(self, code: str) -> Optional[Airline]:
        with self._lock.read_locked():
            return self._graph.airlines.get_by_iata(code)

    def get_airport_by_iata(self, code: str) -> Optional[Airport]:
        with self._lock.read_locked():
            return self._graph.airports.get_by_iata(code)

    def outbound_routes(self, airport_id: int) -> List[Route]:
        """Snapshot of one airport's outbound routes."""
        with self._lock.read_locked():
            return list(self._graph.outbound_routes(airport_id))

    # --- Writes ---

    def insert_airline(self, airline: Airline) -> Airline:
        with self._lock.write_locked():
            return self._graph.airlines.insert(airline)

    def insert_airport(self, airport: Airport) -> Airport:
        with self._lock.write_locked():
            return self._graph.airports.insert(airport)

    def update_airline(self, airline_id: int, **fields: object) -> Airline:
        with self._lock.write_locked():
            return self._graph.airlines.update(airline_id, **fields)

    def update_airport(self, airport_id: int, **fields: object) -> Airport:
        with self._lock.write_locked():
            return self._graph.airports.update(airport_id, **fields)

    @contextmanager
    def write_view(self) -> Iterator[FlightNetworkGraph]:
        """Hold the write lock for a check-then-mutate sequence."""
        with self._lock.write_locked():
            yield self._graph

    # --- Stats ---

    @property
    def route_count(self) -> int:
        with self._lock.read_locked():
            return self._graph.route_count
