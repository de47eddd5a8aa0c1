"""Resolve cuisine/dietary facet filters into candidate restaurant or deal ids."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.deal import Deal
from app.models.facet import Cuisine, DealCuisine, DealDietaryPreference, DietaryPreference
from app.services.search_filters import DiscoveryFilters, FacetFilter


@dataclass(frozen=True)
class ResolvedFacets:
    """Canonical facet ids per category; ``None`` means the category was not requested."""

    cuisine_ids: frozenset[int] | None = None
    dietary_preference_ids: frozenset[int] | None = None


def _resolve_category(db: Session, facet: FacetFilter, model: type[Cuisine] | type[DietaryPreference]) -> frozenset[int] | None:
    if not facet.requested:
        return None
    if facet.ids:
        return frozenset(facet.ids)
    lowered = [name.lower() for name in facet.names]
    rows = db.scalars(select(model.id).where(func.lower(model.name).in_(lowered))).all()
    return frozenset(rows)


def resolve_facets(db: Session, filters: DiscoveryFilters) -> ResolvedFacets:
    """Resolve facet names to ids; unknown names resolve to an empty set."""
    return ResolvedFacets(
        cuisine_ids=_resolve_category(db, filters.cuisines, Cuisine),
        dietary_preference_ids=_resolve_category(db, filters.dietary_preferences, DietaryPreference),
    )


def intersect_ids(current: set[int] | None, candidates: set[int]) -> set[int]:
    """Intersect a running candidate set with the next category's matches."""
    if current is None:
        return set(candidates)
    return current & candidates


def _restaurants_with_active_deal_cuisine(db: Session, cuisine_ids: frozenset[int]) -> set[int]:
    rows = db.scalars(
        select(Deal.restaurant_id)
        .join(DealCuisine, DealCuisine.deal_id == Deal.id)
        .where(Deal.status == "active", DealCuisine.cuisine_id.in_(sorted(cuisine_ids)))
        .distinct()
    ).all()
    return set(rows)


def _restaurants_with_active_deal_dietary(db: Session, dietary_ids: frozenset[int]) -> set[int]:
    rows = db.scalars(
        select(Deal.restaurant_id)
        .join(DealDietaryPreference, DealDietaryPreference.deal_id == Deal.id)
        .where(Deal.status == "active", DealDietaryPreference.dietary_preference_id.in_(sorted(dietary_ids)))
        .distinct()
    ).all()
    return set(rows)


def _restaurants_with_active_deal(db: Session) -> set[int]:
    rows = db.scalars(select(Deal.restaurant_id).where(Deal.status == "active").distinct()).all()
    return set(rows)


def candidate_restaurant_ids(db: Session, facets: ResolvedFacets, *, has_active_deals: bool) -> set[int] | None:
    """Return restaurant ids allowed by facet filters, or None when nothing restricts them.

    An empty set means at least one requested category matched nothing; callers
    must treat it as an empty result, not as "no filter".
    """
    candidates: set[int] | None = None

    if has_active_deals:
        candidates = intersect_ids(candidates, _restaurants_with_active_deal(db))
        if not candidates:
            return set()

    if facets.cuisine_ids is not None:
        matches = _restaurants_with_active_deal_cuisine(db, facets.cuisine_ids) if facets.cuisine_ids else set()
        candidates = intersect_ids(candidates, matches)
        if not candidates:
            return set()

    if facets.dietary_preference_ids is not None:
        matches = (
            _restaurants_with_active_deal_dietary(db, facets.dietary_preference_ids)
            if facets.dietary_preference_ids
            else set()
        )
        candidates = intersect_ids(candidates, matches)
        if not candidates:
            return set()

    return candidates


def candidate_deal_ids(db: Session, facets: ResolvedFacets) -> set[int] | None:
    """Return deal ids tagged with the requested facets, or None when unrestricted."""
    candidates: set[int] | None = None

    if facets.cuisine_ids is not None:
        matches: set[int] = set()
        if facets.cuisine_ids:
            matches = set(
                db.scalars(
                    select(DealCuisine.deal_id).where(DealCuisine.cuisine_id.in_(sorted(facets.cuisine_ids))).distinct()
                ).all()
            )
        candidates = intersect_ids(candidates, matches)
        if not candidates:
            return set()

    if facets.dietary_preference_ids is not None:
        matches = set()
        if facets.dietary_preference_ids:
            matches = set(
                db.scalars(
                    select(DealDietaryPreference.deal_id)
                    .where(DealDietaryPreference.dietary_preference_id.in_(sorted(facets.dietary_preference_ids)))
                    .distinct()
                ).all()
            )
        candidates = intersect_ids(candidates, matches)
        if not candidates:
            return set()

    return candidates


def list_cuisines(db: Session) -> list[Cuisine]:
    """Return the cuisine catalogue ordered by name."""
    return db.query(Cuisine).order_by(Cuisine.name.asc()).all()


def list_dietary_preferences(db: Session) -> list[DietaryPreference]:
    """Return the dietary preference catalogue ordered by name."""
    return db.query(DietaryPreference).order_by(DietaryPreference.name.asc()).all()
