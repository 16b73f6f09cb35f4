"""
Reference entity schemas using Pandera.

Defines the contract for airline, airport and route tables flowing out of
the ingestion layer, plus the immutable record types held by the store.
Schema validation happens at the ingestion boundary only, not per-row.
"""

from dataclasses import dataclass

import pandera as pa
from pandera.typing import DataFrame, Series

# OpenFlights marks missing values with a literal backslash-N
NULL_MARKER = "\\N"


def normalize_iata(code: str | None) -> str:
    """
    Normalize an IATA code for storage and comparison.

    Codes are trimmed and upper-cased. The OpenFlights null marker and
    missing values collapse to the empty string (meaning "no code").

    Examples:
        >>> normalize_iata(" lhr ")
        'LHR'
        >>> normalize_iata("\\\\N")
        ''
    """
    if code is None:
        return ""
    code = code.strip().upper()
    if code == NULL_MARKER:
        return ""
    return code


class AirlineSchema(pa.DataFrameModel):
    """Validated airline table produced by ingestion."""

    id: Series[int] = pa.Field(
        nullable=False,
        description="OpenFlights airline ID",
    )
    iata: Series[str] = pa.Field(
        nullable=False,
        description="Upper-cased IATA code, empty when absent",
    )
    name: Series[str] = pa.Field(nullable=False)
    country: Series[str] = pa.Field(nullable=False)
    active: Series[bool] = pa.Field(
        nullable=False,
        description="OpenFlights Y/N active flag",
    )

    class Config:
        strict = "filter"
        coerce = True
        name = "AirlineSchema"


class AirportSchema(pa.DataFrameModel):
    """Validated airport table produced by ingestion."""

    id: Series[int] = pa.Field(
        nullable=False,
        description="OpenFlights airport ID",
    )
    iata: Series[str] = pa.Field(
        nullable=False,
        description="Upper-cased IATA code, empty when absent",
    )
    name: Series[str] = pa.Field(nullable=False)
    city: Series[str] = pa.Field(nullable=False)
    country: Series[str] = pa.Field(nullable=False)
    latitude: Series[float] = pa.Field(
        nullable=False,
        description="Latitude in decimal degrees",
    )
    longitude: Series[float] = pa.Field(
        nullable=False,
        description="Longitude in decimal degrees",
    )

    class Config:
        strict = "filter"
        coerce = True
        name = "AirportSchema"


class RouteSchema(pa.DataFrameModel):
    """
    Validated route table produced by ingestion.

    Foreign keys are not checked against the airline/airport tables;
    source data is not guaranteed clean and dangling IDs are tolerated.
    """

    airline_id: Series[int] = pa.Field(nullable=False)
    source_id: Series[int] = pa.Field(nullable=False)
    destination_id: Series[int] = pa.Field(nullable=False)
    stops: Series[int] = pa.Field(
        ge=0,
        description="Number of stops, 0 for a direct route",
    )

    class Config:
        strict = "filter"
        coerce = True
        name = "RouteSchema"


AirlineDataFrame = DataFrame[AirlineSchema]
AirportDataFrame = DataFrame[AirportSchema]
RouteDataFrame = DataFrame[RouteSchema]


@dataclass(frozen=True)
class Airline:
    """Immutable airline record. Identity is the numeric ID."""

    id: int
    iata: str = ""
    name: str = ""
    country: str = ""
    active: bool = True


@dataclass(frozen=True)
class Airport:
    """Immutable airport record. Identity is the numeric ID."""

    id: int
    iata: str = ""
    name: str = ""
    city: str = ""
    country: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class Route:
    """
    A directed route between two airports operated by one airline.

    Endpoints and airline are weak references by ID and may not resolve.
    """

    airline_id: int
    source_id: int
    destination_id: int
    stops: int = 0

    @property
    def is_direct(self) -> bool:
        """True for zero-stop routes."""
        return self.stops == 0
