"""Parse and normalize discovery query parameters into typed filters.

Leniency lives here: repeated keys, comma-joined values, parameter aliases and
facet names are all accepted. Everything downstream receives a frozen
``DiscoveryFilters`` instance and never looks at raw request input.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, get_args

from app.core.config import settings
from app.services.geo import GeoPoint

ShowType = Literal["all", "restaurants", "deals"]
SortField = Literal["relevance", "rating", "distance", "newest"]
SortOrder = Literal["asc", "desc"]

SHOW_TYPES: tuple[str, ...] = get_args(ShowType)
SORT_FIELDS: tuple[str, ...] = get_args(SortField)
SORT_ORDERS: tuple[str, ...] = get_args(SortOrder)

DEFAULT_SORT_ORDER: dict[str, SortOrder] = {
    "relevance": "desc",
    "rating": "desc",
    "distance": "asc",
    "newest": "asc",
}
TRUE_VALUES: set[str] = {"true", "1", "yes"}

QueryParamMap = Mapping[str, Sequence[str]]


class SearchValidationError(ValueError):
    """Raised when discovery input is malformed; nothing has touched the store yet."""


@dataclass(frozen=True)
class FacetFilter:
    """Requested values for one facet category."""

    ids: tuple[int, ...] = ()
    names: tuple[str, ...] = ()

    @property
    def requested(self) -> bool:
        return bool(self.ids or self.names)


@dataclass(frozen=True)
class DiscoveryFilters:
    """Normalized discovery request."""

    query: str | None = None
    show_type: ShowType = "all"
    cuisines: FacetFilter = field(default_factory=FacetFilter)
    dietary_preferences: FacetFilter = field(default_factory=FacetFilter)
    origin: GeoPoint | None = None
    radius_km: float | None = None
    has_active_deals: bool = False
    sort_by: SortField = "relevance"
    sort_order: SortOrder = "desc"
    sort_order_explicit: bool = False
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def include_restaurants(self) -> bool:
        return self.show_type != "deals"

    @property
    def include_deals(self) -> bool:
        return self.show_type != "restaurants"


def _values(params: QueryParamMap, *names: str) -> list[str]:
    collected: list[str] = []
    for name in names:
        collected.extend(params.get(name, ()))
    return collected


def _first(params: QueryParamMap, *names: str) -> str | None:
    for name in names:
        values = params.get(name)
        if values:
            return values[0]
    return None


def _split_segments(values: list[str]) -> list[str]:
    segments: list[str] = []
    seen: set[str] = set()
    for value in values:
        for segment in str(value).split(","):
            cleaned = segment.strip()
            if cleaned and cleaned not in seen:
                seen.add(cleaned)
                segments.append(cleaned)
    return segments


def parse_id_list(values: list[str]) -> tuple[int, ...]:
    """Parse repeated/comma-joined integer ids, skipping non-numeric segments."""
    ids: list[int] = []
    for segment in _split_segments(values):
        try:
            parsed = int(segment)
        except ValueError:
            continue
        if parsed not in ids:
            ids.append(parsed)
    return tuple(ids)


def parse_name_list(values: list[str]) -> tuple[str, ...]:
    """Parse repeated/comma-joined names, trimmed and de-duplicated."""
    return tuple(_split_segments(values))


def _parse_float(raw: str | None, label: str) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise SearchValidationError(f"{label} must be a number") from exc
    if not math.isfinite(value):
        raise SearchValidationError(f"{label} must be a finite number")
    return value


def _parse_int(raw: str | None, label: str, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SearchValidationError(f"{label} must be an integer") from exc


def _parse_origin(params: QueryParamMap) -> GeoPoint | None:
    latitude = _parse_float(_first(params, "latitude", "lat"), "Latitude")
    longitude = _parse_float(_first(params, "longitude", "lng", "lon"), "Longitude")

    if (latitude is None) != (longitude is None):
        raise SearchValidationError("Both latitude and longitude are required for location-based search")
    if latitude is None or longitude is None:
        return None
    if not -90 <= latitude <= 90:
        raise SearchValidationError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise SearchValidationError("Longitude must be between -180 and 180")
    return GeoPoint(latitude=latitude, longitude=longitude)


def parse_search_filters(params: QueryParamMap, *, show_type: ShowType | None = None) -> DiscoveryFilters:
    """Validate raw query parameters and return normalized discovery filters."""
    raw_query = _first(params, "q", "query")
    query = raw_query.strip() if raw_query and raw_query.strip() else None

    raw_show_type = show_type or (_first(params, "showType", "entityType", "type") or "all").strip().lower()
    if raw_show_type not in SHOW_TYPES:
        raise SearchValidationError(f"showType must be one of: {', '.join(SHOW_TYPES)}")

    origin = _parse_origin(params)

    radius_km = _parse_float(_first(params, "radius", "distance"), "Radius")
    if radius_km is not None:
        if origin is None:
            raise SearchValidationError("Distance filtering requires both latitude and longitude")
        if radius_km <= 0:
            raise SearchValidationError("Radius must be greater than 0")

    sort_by = (_first(params, "sortBy") or "relevance").strip().lower()
    if sort_by not in SORT_FIELDS:
        raise SearchValidationError(f"sortBy must be one of: {', '.join(SORT_FIELDS)}")

    raw_sort_order = _first(params, "sortOrder")
    if raw_sort_order is not None and raw_sort_order.strip():
        sort_order = raw_sort_order.strip().lower()
        if sort_order not in SORT_ORDERS:
            raise SearchValidationError("sortOrder must be 'asc' or 'desc'")
        sort_order_explicit = True
    else:
        sort_order = DEFAULT_SORT_ORDER[sort_by]
        sort_order_explicit = False

    page = _parse_int(_first(params, "page"), "page", 1)
    if page < 1:
        raise SearchValidationError("page must be >= 1")

    limit = _parse_int(_first(params, "limit"), "limit", settings.search_default_limit)
    if not 1 <= limit <= settings.search_max_limit:
        raise SearchValidationError(f"limit must be between 1 and {settings.search_max_limit}")

    has_active_deals_raw = _first(params, "hasActiveDeals")
    has_active_deals = has_active_deals_raw is not None and has_active_deals_raw.strip().lower() in TRUE_VALUES

    return DiscoveryFilters(
        query=query,
        show_type=raw_show_type,
        cuisines=FacetFilter(
            ids=parse_id_list(_values(params, "cuisineIds", "cuisineId")),
            names=parse_name_list(_values(params, "cuisine", "cuisines")),
        ),
        dietary_preferences=FacetFilter(
            ids=parse_id_list(_values(params, "dietaryPreferenceIds", "dietaryPreferenceId")),
            names=parse_name_list(_values(params, "dietaryPreference", "dietaryPreferences")),
        ),
        origin=origin,
        radius_km=radius_km,
        has_active_deals=has_active_deals,
        sort_by=sort_by,
        sort_order=sort_order,
        sort_order_explicit=sort_order_explicit,
        page=page,
        limit=limit,
    )


def effective_filters(
    filters: DiscoveryFilters,
    cuisine_ids: Sequence[int] | None,
    dietary_preference_ids: Sequence[int] | None,
) -> dict[str, Any]:
    """Return the normalized filter echo included in discovery responses."""
    return {
        "query": filters.query,
        "show_type": filters.show_type,
        "cuisine_ids": sorted(cuisine_ids) if cuisine_ids is not None else [],
        "dietary_preference_ids": sorted(dietary_preference_ids) if dietary_preference_ids is not None else [],
        "latitude": filters.origin.latitude if filters.origin else None,
        "longitude": filters.origin.longitude if filters.origin else None,
        "radius_km": filters.radius_km,
        "has_active_deals": filters.has_active_deals,
        "sort_by": filters.sort_by,
        "sort_order": filters.sort_order,
        "page": filters.page,
        "limit": filters.limit,
    }
