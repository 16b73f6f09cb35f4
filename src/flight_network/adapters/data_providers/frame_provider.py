"""
In-memory DataFrame provider.

Serves pre-built airline, airport and route frames, validating them
against the ingestion schemas on the way out. Useful for tests and for
building a network from data that did not come from flat files.
"""

from typing import Optional

import pandas as pd

from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.schemas.entities import (
    AirlineDataFrame,
    AirlineSchema,
    AirportDataFrame,
    AirportSchema,
    RouteDataFrame,
    RouteSchema,
)


def _empty(schema) -> pd.DataFrame:
    return pd.DataFrame(columns=list(schema.to_schema().columns))


class FrameDataProvider(NetworkDataProvider):
    """Data provider over DataFrames already held in memory."""

    def __init__(
        self,
        airlines: Optional[pd.DataFrame] = None,
        airports: Optional[pd.DataFrame] = None,
        routes: Optional[pd.DataFrame] = None,
    ) -> None:
        self._airlines = airlines if airlines is not None else _empty(AirlineSchema)
        self._airports = airports if airports is not None else _empty(AirportSchema)
        self._routes = routes if routes is not None else _empty(RouteSchema)

    def get_airlines_df(self) -> AirlineDataFrame:
        return AirlineSchema.validate(self._airlines.copy())

    def get_airports_df(self) -> AirportDataFrame:
        return AirportSchema.validate(self._airports.copy())

    def get_routes_df(self) -> RouteDataFrame:
        return RouteSchema.validate(self._routes.copy())

    @property
    def name(self) -> str:
        return "In-Memory Frames"
