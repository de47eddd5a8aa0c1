"""Discovery orchestration: facets -> query plan -> page/count -> hydration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.bookmark import RestaurantBookmark
from app.models.deal import Deal
from app.models.restaurant import Partner, Restaurant
from app.schemas.search import (
    BookmarkStatusResponse,
    DealSearchItem,
    PartnerSummary,
    RestaurantDetail,
    RestaurantDetailDeal,
    RestaurantDetailResponse,
    RestaurantSearchItem,
)
from app.services.facet_resolver import ResolvedFacets, candidate_deal_ids, candidate_restaurant_ids, resolve_facets
from app.services.pagination import Pagination, build_pagination, empty_pagination
from app.services.search_filters import DiscoveryFilters, effective_filters
from app.services.search_hydration import fetch_bookmarked_ids, hydrate_deals, hydrate_restaurants
from app.services.search_query import QueryPlan, build_deal_plan, build_restaurant_plan

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")


class DiscoveryError(Exception):
    """Raised when the store fails while answering a discovery request."""


class RestaurantNotFoundError(Exception):
    """Raised when a restaurant does not exist or is not active."""


@dataclass
class SearchPage(Generic[ItemT]):
    items: list[ItemT]
    pagination: Pagination


@dataclass
class DiscoveryResult:
    restaurants: SearchPage[RestaurantSearchItem]
    deals: SearchPage[DealSearchItem]
    filters_applied: dict[str, Any] = field(default_factory=dict)


def _dialect_name(db: Session) -> str:
    return db.get_bind().dialect.name


def _execute_plan(db: Session, plan: QueryPlan, filters: DiscoveryFilters, *columns: Any) -> tuple[list[Any], int]:
    total_count = int(db.scalar(plan.count_statement()) or 0)
    rows: list[Any] = []
    # Pages past the end still get valid metadata; skip the page query entirely.
    if filters.offset < total_count:
        rows = list(db.execute(plan.page_statement(*columns, limit=filters.limit, offset=filters.offset)).all())
    return rows, total_count


def _search_restaurants(
    db: Session,
    filters: DiscoveryFilters,
    facets: ResolvedFacets,
    viewer_id: str | None,
) -> SearchPage[RestaurantSearchItem]:
    candidates = candidate_restaurant_ids(db, facets, has_active_deals=filters.has_active_deals)
    if candidates is not None and not candidates:
        return SearchPage(items=[], pagination=empty_pagination(filters.page))

    plan = build_restaurant_plan(_dialect_name(db), filters, candidates)
    rows, total_count = _execute_plan(db, plan, filters, Restaurant, Partner)
    items = hydrate_restaurants(db, rows, viewer_id, include_distance=plan.distance is not None)
    return SearchPage(items=items, pagination=build_pagination(filters.page, filters.limit, total_count))


def _search_deals(
    db: Session,
    filters: DiscoveryFilters,
    facets: ResolvedFacets,
    viewer_id: str | None,
) -> SearchPage[DealSearchItem]:
    candidates = candidate_deal_ids(db, facets)
    if candidates is not None and not candidates:
        return SearchPage(items=[], pagination=empty_pagination(filters.page))

    plan = build_deal_plan(_dialect_name(db), filters, candidates)
    rows, total_count = _execute_plan(db, plan, filters, Deal, Restaurant, Partner)
    items = hydrate_deals(db, rows, viewer_id, include_distance=plan.distance is not None)
    return SearchPage(items=items, pagination=build_pagination(filters.page, filters.limit, total_count))


def discover(db: Session, filters: DiscoveryFilters, viewer_id: str | None = None) -> DiscoveryResult:
    """Run discovery for the entity types selected by ``filters.show_type``.

    ``viewer_id`` is an already-resolved identity or ``None`` for anonymous
    callers; this function never inspects credentials.
    """
    try:
        facets = resolve_facets(db, filters)
        restaurants: SearchPage[RestaurantSearchItem] = SearchPage(items=[], pagination=empty_pagination(filters.page))
        deals: SearchPage[DealSearchItem] = SearchPage(items=[], pagination=empty_pagination(filters.page))
        if filters.include_restaurants:
            restaurants = _search_restaurants(db, filters, facets, viewer_id)
        if filters.include_deals:
            deals = _search_deals(db, filters, facets, viewer_id)
    except SQLAlchemyError as exc:
        logger.exception("Discovery query failed (showType=%s, page=%s)", filters.show_type, filters.page)
        raise DiscoveryError("Failed to search") from exc

    return DiscoveryResult(
        restaurants=restaurants,
        deals=deals,
        filters_applied=effective_filters(filters, facets.cuisine_ids, facets.dietary_preference_ids),
    )


def search_restaurants(db: Session, filters: DiscoveryFilters, viewer_id: str | None = None) -> DiscoveryResult:
    """Restaurant-only discovery."""
    return discover(db, _with_show_type(filters, "restaurants"), viewer_id)


def search_deals(db: Session, filters: DiscoveryFilters, viewer_id: str | None = None) -> DiscoveryResult:
    """Deal-only discovery."""
    return discover(db, _with_show_type(filters, "deals"), viewer_id)


def _with_show_type(filters: DiscoveryFilters, show_type: str) -> DiscoveryFilters:
    if filters.show_type == show_type:
        return filters
    return replace(filters, show_type=show_type)


def _get_active_restaurant(db: Session, restaurant_id: int) -> Restaurant:
    restaurant: Restaurant | None = (
        db.query(Restaurant)
        .filter(Restaurant.id == restaurant_id, Restaurant.is_active.is_(True))
        .first()
    )
    if restaurant is None:
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
    return restaurant


def get_restaurant_detail(db: Session, restaurant_id: int, viewer_id: str | None = None) -> RestaurantDetailResponse:
    """Return an active restaurant with its active deals and the viewer's bookmark state."""
    restaurant = _get_active_restaurant(db, restaurant_id)
    active_deals: list[Deal] = (
        db.query(Deal)
        .filter(Deal.restaurant_id == restaurant_id, Deal.status == "active")
        .order_by(Deal.created_at.asc(), Deal.id.asc())
        .all()
    )
    bookmarked = fetch_bookmarked_ids(
        db, viewer_id, RestaurantBookmark.restaurant_id, RestaurantBookmark.user_id, [restaurant_id]
    )
    partner = restaurant.partner

    return RestaurantDetailResponse(
        restaurant=RestaurantDetail(
            id=restaurant.id,
            name=restaurant.name,
            description=restaurant.description,
            image_url=restaurant.image_url,
            street_address=restaurant.street_address,
            city=restaurant.city,
            province=restaurant.province,
            postal_code=restaurant.postal_code,
            phone=restaurant.phone,
            latitude=restaurant.latitude,
            longitude=restaurant.longitude,
            rating_avg=float(restaurant.rating_avg or 0),
            rating_count=restaurant.rating_count or 0,
            created_at=restaurant.created_at,
            partner=PartnerSummary(id=partner.id, business_name=partner.business_name) if partner else None,
            is_bookmarked=restaurant_id in bookmarked,
        ),
        active_deals=[
            RestaurantDetailDeal(
                id=deal.id,
                title=deal.title,
                description=deal.description,
                start_date=deal.start_date,
                end_date=deal.end_date,
                created_at=deal.created_at,
            )
            for deal in active_deals
        ],
    )


def get_restaurant_bookmark_status(db: Session, restaurant_id: int, viewer_id: str) -> BookmarkStatusResponse:
    """Return whether the viewer bookmarked a restaurant and their notification choice."""
    bookmark: RestaurantBookmark | None = db.scalar(
        select(RestaurantBookmark)
        .where(RestaurantBookmark.user_id == viewer_id, RestaurantBookmark.restaurant_id == restaurant_id)
        .limit(1)
    )
    return BookmarkStatusResponse(
        restaurant_id=restaurant_id,
        is_bookmarked=bookmark is not None,
        notify_on_deal=bookmark.notify_on_deal if bookmark is not None else False,
        bookmarked_at=bookmark.created_at if bookmark is not None else None,
    )
