"""
Great-circle distance helpers.

Haversine distance on a spherical Earth, expressed in statute miles.
Works on scalars and on numpy arrays so a batch of legs can be computed
in one vectorized call.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import numpy.typing as npt

from src.flight_network.schemas.entities import Airport

EARTH_RADIUS_KM = 6371.0
KM_TO_MILES = 0.621371

ArrayLike = Union[float, npt.ArrayLike]


def haversine_miles(
    lat1: ArrayLike,
    lon1: ArrayLike,
    lat2: ArrayLike,
    lon2: ArrayLike,
) -> Union[float, np.ndarray]:
    """
    Orthodromic distance in miles between coordinate pairs.

    Uses the atan2 form of the haversine so antipodal points do not hit
    the asin domain edge. Inputs are decimal degrees; any coordinates,
    including degenerate ones like (0, 0), produce a distance.

    Args:
        lat1: Latitude(s) of the first point(s).
        lon1: Longitude(s) of the first point(s).
        lat2: Latitude(s) of the second point(s).
        lon2: Longitude(s) of the second point(s).

    Returns:
        A float for scalar input, otherwise an array of distances.

    Example:
        >>> round(haversine_miles(0.0, 0.0, 0.0, 1.0), 2)
        69.09
    """
    phi1 = np.radians(np.asarray(lat1, dtype=float))
    phi2 = np.radians(np.asarray(lat2, dtype=float))
    lam1 = np.radians(np.asarray(lon1, dtype=float))
    lam2 = np.radians(np.asarray(lon2, dtype=float))

    sin_dlat = np.sin((phi2 - phi1) / 2.0)
    sin_dlon = np.sin((lam2 - lam1) / 2.0)

    h = sin_dlat * sin_dlat + np.cos(phi1) * np.cos(phi2) * sin_dlon * sin_dlon
    # Rounding can push h a hair outside [0, 1] near antipodes
    h = np.clip(h, 0.0, 1.0)

    c = 2.0 * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))
    miles = EARTH_RADIUS_KM * c * KM_TO_MILES

    if np.ndim(miles) == 0:
        return float(miles)
    return miles


def great_circle_miles(a: Airport, b: Airport) -> float:
    """Distance in miles between two airports."""
    return haversine_miles(a.latitude, a.longitude, b.latitude, b.longitude)
