"""
Network Data Provider port interface.

Defines the abstract contract for sources of airline, airport and route
tables. Implementations handle the specifics of a backend (flat files,
in-memory frames for tests).
"""

from abc import ABC, abstractmethod

from src.flight_network.schemas.entities import (
    AirlineDataFrame,
    AirportDataFrame,
    RouteDataFrame,
)


class NetworkDataProvider(ABC):
    """
    Abstract interface for reference data providers.

    Providers return validated DataFrames directly. Field coercion and
    skipping of malformed rows happen here, at the boundary, so the store
    only ever sees clean records.

    Implementations:
    - OpenFlightsDataProvider: airlines.dat / airports.dat / routes.dat
    - FrameDataProvider: pre-built DataFrames (tests, notebooks)
    """

    @abstractmethod
    def get_airlines_df(self) -> AirlineDataFrame:
        """
        Return airlines validated against AirlineSchema.

        Raises:
            pandera.errors.SchemaError: If data fails validation.
            FileNotFoundError: If the backing file is missing.
        """
        ...

    @abstractmethod
    def get_airports_df(self) -> AirportDataFrame:
        """Return airports validated against AirportSchema."""
        ...

    @abstractmethod
    def get_routes_df(self) -> RouteDataFrame:
        """Return routes validated against RouteSchema, in file order."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""
        ...
