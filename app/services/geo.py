"""Great-circle distance helpers shared by Python code and SQL queries."""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

EARTH_RADIUS_KM: float = 6371.0
SQLITE_DISTANCE_FUNCTION: str = "haversine_km"


@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude pair in degrees."""

    latitude: float
    longitude: float


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance between two points in kilometers."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push sqrt(a) slightly past 1 for antipodal points.
    angular = min(1.0, max(-1.0, math.sqrt(a)))
    return 2 * EARTH_RADIUS_KM * math.asin(angular)


def sqlite_haversine_km(
    lat1: float | None,
    lon1: float | None,
    lat2: float | None,
    lon2: float | None,
) -> float | None:
    """SQL-callable variant returning NULL when a coordinate is missing."""
    if lat1 is None or lon1 is None or lat2 is None or lon2 is None:
        return None
    return haversine_km(float(lat1), float(lon1), float(lat2), float(lon2))


def distance_expression(
    dialect_name: str,
    origin: GeoPoint,
    latitude_column: ColumnElement[float],
    longitude_column: ColumnElement[float],
) -> ColumnElement[float]:
    """Build a SQL expression for the distance between origin and a row's coordinates."""
    if dialect_name == "sqlite":
        return getattr(func, SQLITE_DISTANCE_FUNCTION)(
            origin.latitude,
            origin.longitude,
            latitude_column,
            longitude_column,
        )

    phi1 = func.radians(origin.latitude)
    phi2 = func.radians(latitude_column)
    dphi = func.radians(latitude_column - origin.latitude)
    dlambda = func.radians(longitude_column - origin.longitude)
    a = func.power(func.sin(dphi / 2), 2) + func.cos(phi1) * func.cos(phi2) * func.power(func.sin(dlambda / 2), 2)
    angular = func.least(1.0, func.greatest(-1.0, func.sqrt(a)))
    return 2 * EARTH_RADIUS_KM * func.asin(angular)
