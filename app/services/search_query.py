"""Predicate and ordering assembly for discovery queries.

A ``QueryPlan`` is built once per search and yields both the page statement
and the count statement, so the two always share joins and predicates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from app.models.deal import Deal
from app.models.restaurant import Partner, Restaurant
from app.services.geo import distance_expression
from app.services.search_filters import DiscoveryFilters, SortOrder

LIKE_ESCAPE: str = "\\"


@dataclass
class QueryPlan:
    """Joins, predicates and ordering shared by the page and count queries."""

    root: Any
    joins: list[tuple[Any, ColumnElement[bool]]] = field(default_factory=list)
    predicates: list[ColumnElement[bool]] = field(default_factory=list)
    distance: ColumnElement[float] | None = None
    order_by: list[Any] = field(default_factory=list)

    def _apply(self, stmt: Select) -> Select:
        for target, onclause in self.joins:
            stmt = stmt.join(target, onclause, isouter=True)
        return stmt.where(*self.predicates)

    def page_statement(self, *columns: Any, limit: int, offset: int) -> Select:
        selected: list[Any] = list(columns)
        if self.distance is not None:
            selected.append(self.distance.label("distance_km"))
        stmt = self._apply(select(*selected).select_from(self.root))
        return stmt.order_by(*self.order_by).limit(limit).offset(offset)

    def count_statement(self) -> Select:
        return self._apply(select(func.count(self.root.id)).select_from(self.root))


def like_pattern(term: str) -> str:
    """Return a substring LIKE pattern with user wildcards escaped."""
    escaped = term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _text_match(term: str, *columns: ColumnElement[str]) -> ColumnElement[bool]:
    pattern = like_pattern(term)
    return or_(*(func.coalesce(column, "").ilike(pattern, escape=LIKE_ESCAPE) for column in columns))


def _ordered(column: ColumnElement[Any], order: SortOrder) -> Any:
    return column.asc() if order == "asc" else column.desc()


def _distance_ordering(distance: ColumnElement[float], order: SortOrder, id_column: Any) -> list[Any]:
    # Rows without coordinates sort after every located row in both directions.
    return [case((distance.is_(None), 1), else_=0).asc(), _ordered(distance, order), id_column.asc()]


def _geo_predicates(filters: DiscoveryFilters, distance: ColumnElement[float] | None) -> list[ColumnElement[bool]]:
    if distance is None or filters.radius_km is None:
        return []
    return [
        Restaurant.latitude.is_not(None),
        Restaurant.longitude.is_not(None),
        distance <= filters.radius_km,
    ]


def _build_distance(dialect_name: str, filters: DiscoveryFilters) -> ColumnElement[float] | None:
    if filters.origin is None:
        return None
    return distance_expression(dialect_name, filters.origin, Restaurant.latitude, Restaurant.longitude)


def restaurant_order_by(filters: DiscoveryFilters, distance: ColumnElement[float] | None) -> list[Any]:
    """Ordering for restaurant search; always ends with a unique tie-break."""
    sort_by = filters.sort_by
    order = filters.sort_order

    if sort_by == "relevance":
        if distance is not None:
            return _distance_ordering(distance, order if filters.sort_order_explicit else "asc", Restaurant.id)
        sort_by = "rating"
    if sort_by == "distance" and distance is not None:
        return _distance_ordering(distance, order, Restaurant.id)
    if sort_by == "rating":
        return [
            _ordered(Restaurant.rating_avg, order),
            _ordered(Restaurant.rating_count, order),
            Restaurant.id.asc(),
        ]
    return [_ordered(Restaurant.created_at, order), Restaurant.id.asc()]


def deal_order_by(filters: DiscoveryFilters, distance: ColumnElement[float] | None) -> list[Any]:
    """Ordering for deal search; deals rank by their restaurant's rating, then creation time."""
    sort_by = filters.sort_by
    order = filters.sort_order

    if sort_by == "relevance":
        if distance is not None:
            return _distance_ordering(distance, order if filters.sort_order_explicit else "asc", Deal.id)
        sort_by = "rating"
    if sort_by == "distance" and distance is not None:
        return _distance_ordering(distance, order, Deal.id)
    if sort_by == "rating":
        return [
            _ordered(Restaurant.rating_avg, order),
            _ordered(Deal.created_at, order),
            Deal.id.asc(),
        ]
    return [_ordered(Deal.created_at, order), Deal.id.asc()]


def build_restaurant_plan(
    dialect_name: str,
    filters: DiscoveryFilters,
    candidate_ids: set[int] | None,
) -> QueryPlan:
    """Assemble the restaurant search plan for already-resolved candidate ids."""
    distance = _build_distance(dialect_name, filters)
    predicates: list[ColumnElement[bool]] = [Restaurant.is_active.is_(True)]

    if filters.query:
        predicates.append(
            _text_match(filters.query, Restaurant.name, Restaurant.description, Partner.business_name)
        )
    if candidate_ids is not None:
        predicates.append(Restaurant.id.in_(sorted(candidate_ids)))
    predicates.extend(_geo_predicates(filters, distance))

    return QueryPlan(
        root=Restaurant,
        joins=[(Partner, Partner.id == Restaurant.partner_id)],
        predicates=predicates,
        distance=distance,
        order_by=restaurant_order_by(filters, distance),
    )


def build_deal_plan(
    dialect_name: str,
    filters: DiscoveryFilters,
    candidate_ids: set[int] | None,
) -> QueryPlan:
    """Assemble the deal search plan for already-resolved candidate ids."""
    distance = _build_distance(dialect_name, filters)
    predicates: list[ColumnElement[bool]] = [
        Deal.status == "active",
        Restaurant.is_active.is_(True),
    ]

    if filters.query:
        predicates.append(_text_match(filters.query, Deal.title, Deal.description, Restaurant.name))
    if candidate_ids is not None:
        predicates.append(Deal.id.in_(sorted(candidate_ids)))
    predicates.extend(_geo_predicates(filters, distance))

    return QueryPlan(
        root=Deal,
        joins=[
            (Restaurant, Restaurant.id == Deal.restaurant_id),
            (Partner, Partner.id == Restaurant.partner_id),
        ],
        predicates=predicates,
        distance=distance,
        order_by=deal_order_by(filters, distance),
    )
