"""Great-circle distance tests."""

import math

import pytest
from sqlalchemy import literal, select
from sqlalchemy.dialects import postgresql

from app.services.geo import EARTH_RADIUS_KM, GeoPoint, distance_expression, haversine_km, sqlite_haversine_km

TORONTO = (43.6532, -79.3832)
MONTREAL = (45.5017, -73.5673)


def test_distance_to_self_is_zero() -> None:
    assert haversine_km(*TORONTO, *TORONTO) == 0.0


def test_distance_is_symmetric() -> None:
    forward = haversine_km(*TORONTO, *MONTREAL)
    backward = haversine_km(*MONTREAL, *TORONTO)
    assert forward == pytest.approx(backward)


def test_toronto_to_montreal_matches_known_distance() -> None:
    assert haversine_km(*TORONTO, *MONTREAL) == pytest.approx(504, abs=5)


def test_antipodal_points_do_not_raise() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)
    assert haversine_km(90.0, 0.0, -90.0, 0.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)


def test_sqlite_variant_returns_none_for_missing_coordinates() -> None:
    assert sqlite_haversine_km(43.0, -79.0, None, -79.0) is None
    assert sqlite_haversine_km(*TORONTO, *MONTREAL) == pytest.approx(haversine_km(*TORONTO, *MONTREAL))


def test_sqlite_expression_matches_python_distance(db) -> None:
    expression = distance_expression(
        "sqlite",
        GeoPoint(latitude=TORONTO[0], longitude=TORONTO[1]),
        literal(MONTREAL[0]),
        literal(MONTREAL[1]),
    )

    assert db.scalar(select(expression)) == pytest.approx(haversine_km(*TORONTO, *MONTREAL))


def test_postgres_expression_clamps_before_asin() -> None:
    expression = distance_expression("postgresql", GeoPoint(latitude=1.0, longitude=2.0), literal(3.0), literal(4.0))
    compiled = str(expression.compile(dialect=postgresql.dialect())).lower()

    assert "asin(least(" in compiled
    assert "greatest(" in compiled
    assert "haversine_km" not in compiled
