"""
OpenFlights Data Provider - flat file to DataFrame adapter.

Reads the headerless OpenFlights tables (airlines.dat, airports.dat,
routes.dat) and transforms them into schema-compliant DataFrames.
Malformed rows (too few fields, missing numeric keys) are skipped here
so the store only ever sees clean records.
"""

import io
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.schemas.entities import (
    NULL_MARKER,
    AirlineDataFrame,
    AirlineSchema,
    AirportDataFrame,
    AirportSchema,
    RouteDataFrame,
    RouteSchema,
)

logger = logging.getLogger(__name__)

# Column layouts of the OpenFlights data files
AIRLINE_COLUMNS: List[str] = [
    "id", "name", "alias", "iata", "icao", "callsign", "country", "active",
]
AIRPORT_COLUMNS: List[str] = [
    "id", "name", "city", "country", "iata", "icao", "latitude", "longitude",
    "altitude", "timezone", "dst", "tz_database", "type", "source",
]
ROUTE_COLUMNS: List[str] = [
    "airline", "airline_id", "source", "source_id", "destination",
    "destination_id", "codeshare", "stops", "equipment",
]

# Minimum number of fields a row needs to be usable
MIN_AIRLINE_FIELDS = 8
MIN_AIRPORT_FIELDS = 8
MIN_ROUTE_FIELDS = 9

ACTIVE_FLAGS = frozenset({"Y", "y", "1"})

# Per-row field count carried alongside the raw columns
FIELD_COUNT = "_field_count"

# Quoted sections, so commas inside them are not counted as separators
QUOTED_SECTION = r'"[^"]*"'

PathLike = Union[str, Path]


def count_fields(lines: pd.Series) -> pd.Series:
    """
    Number of comma-separated fields on each raw line.

    Quoted sections are removed first so commas inside names like
    "Comma, Airport" do not count.

    Example:
        >>> count_fields(pd.Series(['1,"a, b",c', "x"])).tolist()
        [3, 1]
    """
    unquoted = lines.str.replace(QUOTED_SECTION, "", regex=True)
    return unquoted.str.count(",") + 1


def read_dat_file(path: PathLike, columns: List[str]) -> pd.DataFrame:
    """
    Read a headerless, quote-aware OpenFlights file as strings.

    Every value is kept as a raw string. The number of fields each line
    actually carried is added as the FIELD_COUNT column, so callers can
    reject short rows whatever the parser fills absent fields with.
    Fields beyond `columns` are read and discarded; the row is kept.

    Args:
        path: File to read.
        columns: Names for the file's columns, in order.

    Returns:
        DataFrame of raw string values plus FIELD_COUNT.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If quoting spans lines, so rows cannot be matched to
            their field counts.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    text = path.read_text(encoding="utf-8", errors="replace")
    raw_lines = [line for line in text.splitlines() if line.strip()]

    if not raw_lines:
        logger.warning(f"Data file is empty: {path}")
        empty = pd.DataFrame(columns=columns, dtype=str)
        empty[FIELD_COUNT] = pd.Series(dtype="int64")
        return empty

    lines = pd.Series(raw_lines, dtype=str)
    field_counts = count_fields(lines).astype("int64")

    # Wide enough for the longest line, so no row is rejected as too long
    width = max(len(columns), int(field_counts.max()))
    names = columns + [f"extra_{i}" for i in range(len(columns), width)]

    df = pd.read_csv(
        io.StringIO("\n".join(lines)),
        header=None,
        names=names,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        na_values=[],
        quotechar='"',
        skip_blank_lines=False,
    )
    if len(df) != len(field_counts):
        raise ValueError(f"Unbalanced quoting in {path}: {len(df)} rows from {len(lines)} lines")

    df = df[columns].copy()
    df[FIELD_COUNT] = field_counts.to_numpy()
    return df


def _present_fields(df: pd.DataFrame) -> pd.Series:
    """Number of fields each row actually carried."""
    return df[FIELD_COUNT]


def _strip(series: pd.Series) -> pd.Series:
    return series.fillna("").str.strip()


def _normalize_codes(series: pd.Series) -> pd.Series:
    """Vectorized IATA normalization (trim, upper, null marker -> '')."""
    codes = _strip(series).str.upper()
    return codes.mask(codes == NULL_MARKER, "")


def _numeric_key(series: pd.Series) -> pd.Series:
    """Parse an integer key column; null markers and junk become NaN."""
    raw = _strip(series)
    raw = raw.mask((raw == NULL_MARKER) | (raw == ""))
    return pd.to_numeric(raw, errors="coerce")


def parse_airlines(raw: pd.DataFrame) -> AirlineDataFrame:
    """
    Coerce raw airlines.dat rows into AirlineSchema.

    Rows with fewer than 8 fields or a missing ID are skipped.
    """
    raw = raw[_present_fields(raw) >= MIN_AIRLINE_FIELDS]
    ids = _numeric_key(raw["id"])
    keep = ids.notna()

    df = pd.DataFrame(
        {
            "id": ids[keep].astype("int64"),
            "iata": _normalize_codes(raw.loc[keep, "iata"]),
            "name": _strip(raw.loc[keep, "name"]),
            "country": _strip(raw.loc[keep, "country"]),
            "active": _strip(raw.loc[keep, "active"]).isin(ACTIVE_FLAGS),
        }
    ).reset_index(drop=True)

    return AirlineSchema.validate(df)


def parse_airports(raw: pd.DataFrame) -> AirportDataFrame:
    """
    Coerce raw airports.dat rows into AirportSchema.

    Rows with fewer than 8 fields or a missing ID are skipped.
    Unparseable coordinates become 0.0.
    """
    raw = raw[_present_fields(raw) >= MIN_AIRPORT_FIELDS]
    ids = _numeric_key(raw["id"])
    keep = ids.notna()
    raw = raw[keep]

    df = pd.DataFrame(
        {
            "id": ids[keep].astype("int64"),
            "iata": _normalize_codes(raw["iata"]),
            "name": _strip(raw["name"]),
            "city": _strip(raw["city"]),
            "country": _strip(raw["country"]),
            "latitude": pd.to_numeric(_strip(raw["latitude"]), errors="coerce").fillna(0.0),
            "longitude": pd.to_numeric(_strip(raw["longitude"]), errors="coerce").fillna(0.0),
        }
    ).reset_index(drop=True)

    return AirportSchema.validate(df)


def parse_routes(raw: pd.DataFrame) -> RouteDataFrame:
    """
    Coerce raw routes.dat rows into RouteSchema, preserving file order.

    Rows with fewer than 9 fields or a missing airline, source or
    destination ID are skipped. Unparseable stop counts become 0.
    """
    raw = raw[_present_fields(raw) >= MIN_ROUTE_FIELDS]
    airline_ids = _numeric_key(raw["airline_id"])
    source_ids = _numeric_key(raw["source_id"])
    destination_ids = _numeric_key(raw["destination_id"])
    keep = airline_ids.notna() & source_ids.notna() & destination_ids.notna()

    stops = pd.to_numeric(_strip(raw.loc[keep, "stops"]), errors="coerce")

    df = pd.DataFrame(
        {
            "airline_id": airline_ids[keep].astype("int64"),
            "source_id": source_ids[keep].astype("int64"),
            "destination_id": destination_ids[keep].astype("int64"),
            "stops": stops.fillna(0).clip(lower=0).astype("int64"),
        }
    ).reset_index(drop=True)

    return RouteSchema.validate(df)


class OpenFlightsDataProvider(NetworkDataProvider):
    """
    Data provider for OpenFlights flat files.

    Each table is read lazily on request; nothing is cached here since
    the store builds once at startup.

    Attributes:
        airlines_path: Path to airlines.dat.
        airports_path: Path to airports.dat.
        routes_path: Path to routes.dat.
    """

    def __init__(
        self,
        data_dir: PathLike = "data",
        airlines_path: Optional[PathLike] = None,
        airports_path: Optional[PathLike] = None,
        routes_path: Optional[PathLike] = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            data_dir: Directory holding the three default-named files.
            airlines_path: Override for airlines.dat.
            airports_path: Override for airports.dat.
            routes_path: Override for routes.dat.
        """
        data_dir = Path(data_dir)
        self.airlines_path = Path(airlines_path or data_dir / "airlines.dat")
        self.airports_path = Path(airports_path or data_dir / "airports.dat")
        self.routes_path = Path(routes_path or data_dir / "routes.dat")

    def get_airlines_df(self) -> AirlineDataFrame:
        df = parse_airlines(read_dat_file(self.airlines_path, AIRLINE_COLUMNS))
        logger.info(f"Loaded {len(df)} airlines from {self.airlines_path}")
        return df

    def get_airports_df(self) -> AirportDataFrame:
        df = parse_airports(read_dat_file(self.airports_path, AIRPORT_COLUMNS))
        logger.info(f"Loaded {len(df)} airports from {self.airports_path}")
        return df

    def get_routes_df(self) -> RouteDataFrame:
        df = parse_routes(read_dat_file(self.routes_path, ROUTE_COLUMNS))
        logger.info(f"Loaded {len(df)} routes from {self.routes_path}")
        return df

    @property
    def name(self) -> str:
        return "OpenFlights"
