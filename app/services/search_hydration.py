"""Batch enrichment of discovery result pages."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.bookmark import DealBookmark, RestaurantBookmark
from app.models.deal import Deal
from app.models.facet import Cuisine, DealCuisine, DealDietaryPreference, DietaryPreference
from app.models.restaurant import Partner, Restaurant
from app.schemas.search import (
    DealRestaurantSummary,
    DealSearchItem,
    FacetTag,
    PartnerSummary,
    RestaurantDealSummary,
    RestaurantSearchItem,
)

logger = logging.getLogger(__name__)

TagsByDeal = dict[int, list[FacetTag]]


def fetch_deal_tags(db: Session, deal_ids: Sequence[int]) -> tuple[TagsByDeal, TagsByDeal]:
    """Return cuisine and dietary tags keyed by deal id for a batch of deals."""
    cuisines_by_deal: TagsByDeal = defaultdict(list)
    dietary_by_deal: TagsByDeal = defaultdict(list)
    if not deal_ids:
        return cuisines_by_deal, dietary_by_deal

    cuisine_rows = db.execute(
        select(DealCuisine.deal_id, Cuisine.id, Cuisine.name)
        .join(Cuisine, Cuisine.id == DealCuisine.cuisine_id)
        .where(DealCuisine.deal_id.in_(list(deal_ids)))
        .order_by(Cuisine.name.asc())
    ).all()
    for deal_id, cuisine_id, cuisine_name in cuisine_rows:
        cuisines_by_deal[deal_id].append(FacetTag(id=cuisine_id, name=cuisine_name))

    dietary_rows = db.execute(
        select(DealDietaryPreference.deal_id, DietaryPreference.id, DietaryPreference.name)
        .join(DietaryPreference, DietaryPreference.id == DealDietaryPreference.dietary_preference_id)
        .where(DealDietaryPreference.deal_id.in_(list(deal_ids)))
        .order_by(DietaryPreference.name.asc())
    ).all()
    for deal_id, dietary_id, dietary_name in dietary_rows:
        dietary_by_deal[deal_id].append(FacetTag(id=dietary_id, name=dietary_name))

    return cuisines_by_deal, dietary_by_deal


def fetch_bookmarked_ids(
    db: Session,
    viewer_id: str | None,
    target_column: Any,
    user_column: Any,
    target_ids: Sequence[int],
) -> set[int]:
    """Return which of ``target_ids`` the viewer bookmarked.

    Anonymous viewers never trigger a lookup. A failed lookup degrades to
    "nothing bookmarked" instead of failing the page. The lookup runs in a
    savepoint so a failure leaves the already loaded page rows intact.
    """
    if viewer_id is None or not target_ids:
        return set()
    try:
        with db.begin_nested():
            rows = db.scalars(
                select(target_column).where(user_column == viewer_id, target_column.in_(list(target_ids)))
            ).all()
    except SQLAlchemyError:
        logger.warning("Bookmark lookup failed for viewer %s; returning results without bookmarks", viewer_id, exc_info=True)
        return set()
    return set(rows)


def _partner_summary(partner: Partner | None) -> PartnerSummary | None:
    if partner is None:
        return None
    return PartnerSummary(id=partner.id, business_name=partner.business_name)


def _distance_value(row: Any, include_distance: bool) -> float | None:
    if not include_distance:
        return None
    value = row._mapping.get("distance_km")
    return float(value) if value is not None else None


def hydrate_restaurants(
    db: Session,
    rows: Sequence[Any],
    viewer_id: str | None,
    *,
    include_distance: bool,
) -> list[RestaurantSearchItem]:
    """Attach active deals, their tags and bookmark state to restaurant rows.

    Each row carries ``Restaurant`` and ``Partner`` entities plus an optional
    ``distance_km`` column.
    """
    restaurant_ids = [row.Restaurant.id for row in rows]
    deals_by_restaurant: dict[int, list[RestaurantDealSummary]] = defaultdict(list)
    bookmarked: set[int] = set()

    if restaurant_ids:
        active_deals: list[Deal] = list(
            db.scalars(
                select(Deal)
                .where(Deal.restaurant_id.in_(restaurant_ids), Deal.status == "active")
                .order_by(Deal.created_at.asc(), Deal.id.asc())
            ).all()
        )
        cuisines_by_deal, dietary_by_deal = fetch_deal_tags(db, [deal.id for deal in active_deals])
        for deal in active_deals:
            deals_by_restaurant[deal.restaurant_id].append(
                RestaurantDealSummary(
                    id=deal.id,
                    title=deal.title,
                    description=deal.description,
                    restaurant_id=deal.restaurant_id,
                    start_date=deal.start_date,
                    end_date=deal.end_date,
                    cuisines=cuisines_by_deal.get(deal.id, []),
                    dietary_preferences=dietary_by_deal.get(deal.id, []),
                )
            )
        bookmarked = fetch_bookmarked_ids(
            db, viewer_id, RestaurantBookmark.restaurant_id, RestaurantBookmark.user_id, restaurant_ids
        )

    items: list[RestaurantSearchItem] = []
    for row in rows:
        restaurant: Restaurant = row.Restaurant
        active = deals_by_restaurant.get(restaurant.id, [])
        items.append(
            RestaurantSearchItem(
                id=restaurant.id,
                name=restaurant.name,
                description=restaurant.description,
                image_url=restaurant.image_url,
                street_address=restaurant.street_address,
                city=restaurant.city,
                province=restaurant.province,
                latitude=restaurant.latitude,
                longitude=restaurant.longitude,
                rating_avg=float(restaurant.rating_avg or 0),
                rating_count=restaurant.rating_count or 0,
                created_at=restaurant.created_at,
                partner=_partner_summary(row.Partner),
                distance_km=_distance_value(row, include_distance),
                active_deals=active,
                active_deals_count=len(active),
                is_bookmarked=restaurant.id in bookmarked,
            )
        )
    return items


def hydrate_deals(
    db: Session,
    rows: Sequence[Any],
    viewer_id: str | None,
    *,
    include_distance: bool,
) -> list[DealSearchItem]:
    """Attach facet tags and bookmark state to deal rows (``Deal``, ``Restaurant``, ``Partner``)."""
    deal_ids = [row.Deal.id for row in rows]
    cuisines_by_deal, dietary_by_deal = fetch_deal_tags(db, deal_ids)
    bookmarked = fetch_bookmarked_ids(db, viewer_id, DealBookmark.deal_id, DealBookmark.user_id, deal_ids)

    items: list[DealSearchItem] = []
    for row in rows:
        deal: Deal = row.Deal
        restaurant: Restaurant = row.Restaurant
        items.append(
            DealSearchItem(
                id=deal.id,
                title=deal.title,
                description=deal.description,
                status=deal.status,
                start_date=deal.start_date,
                end_date=deal.end_date,
                created_at=deal.created_at,
                restaurant=DealRestaurantSummary(
                    id=restaurant.id,
                    name=restaurant.name,
                    image_url=restaurant.image_url,
                    street_address=restaurant.street_address,
                    city=restaurant.city,
                    province=restaurant.province,
                    latitude=restaurant.latitude,
                    longitude=restaurant.longitude,
                    rating_avg=float(restaurant.rating_avg or 0),
                    rating_count=restaurant.rating_count or 0,
                ),
                partner=_partner_summary(row.Partner),
                cuisines=cuisines_by_deal.get(deal.id, []),
                dietary_preferences=dietary_by_deal.get(deal.id, []),
                is_bookmarked=deal.id in bookmarked,
                distance_km=_distance_value(row, include_distance),
            )
        )
    return items
