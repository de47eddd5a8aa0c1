"""Discovery endpoints."""

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.security import get_optional_viewer_id, get_required_viewer_id
from app.db.session import get_db
from app.schemas.search import (
    BookmarkStatusResponse,
    DealSearchResponse,
    DiscoveryPagination,
    DiscoveryResponse,
    FiltersApplied,
    PaginationMeta,
    RestaurantDetailResponse,
    RestaurantSearchResponse,
)
from app.services.pagination import Pagination
from app.services.search_filters import DiscoveryFilters, SearchValidationError, ShowType, parse_search_filters
from app.services.search_service import (
    DiscoveryError,
    DiscoveryResult,
    RestaurantNotFoundError,
    discover,
    get_restaurant_bookmark_status,
    get_restaurant_detail,
)
from app.services.search_service import search_deals as search_deals_service
from app.services.search_service import search_restaurants as search_restaurants_service

router: APIRouter = APIRouter()


def _parse_filters(request: Request, show_type: ShowType | None = None) -> DiscoveryFilters:
    params = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    try:
        return parse_search_filters(params, show_type=show_type)
    except SearchValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _run_discovery(
    runner: Callable[[Session, DiscoveryFilters, str | None], DiscoveryResult],
    db: Session,
    filters: DiscoveryFilters,
    viewer_id: str | None,
) -> DiscoveryResult:
    try:
        return runner(db, filters, viewer_id)
    except DiscoveryError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


def _serialize_pagination(pagination: Pagination) -> PaginationMeta:
    return PaginationMeta(
        current_page=pagination.current_page,
        total_pages=pagination.total_pages,
        total_count=pagination.total_count,
        has_next_page=pagination.has_next_page,
        has_previous_page=pagination.has_previous_page,
    )


@router.get("", response_model=DiscoveryResponse)
def search(
    request: Request,
    db: Session = Depends(get_db),
    viewer_id: str | None = Depends(get_optional_viewer_id),
) -> DiscoveryResponse:
    """Search restaurants and/or deals depending on showType."""
    result = _run_discovery(discover, db, _parse_filters(request), viewer_id)
    return DiscoveryResponse(
        restaurants=result.restaurants.items,
        deals=result.deals.items,
        pagination=DiscoveryPagination(
            restaurants=_serialize_pagination(result.restaurants.pagination),
            deals=_serialize_pagination(result.deals.pagination),
        ),
        filters_applied=FiltersApplied(**result.filters_applied),
    )


@router.get("/restaurants", response_model=RestaurantSearchResponse)
def search_restaurants(
    request: Request,
    db: Session = Depends(get_db),
    viewer_id: str | None = Depends(get_optional_viewer_id),
) -> RestaurantSearchResponse:
    """Search active restaurants."""
    result = _run_discovery(search_restaurants_service, db, _parse_filters(request, show_type="restaurants"), viewer_id)
    return RestaurantSearchResponse(
        restaurants=result.restaurants.items,
        pagination=_serialize_pagination(result.restaurants.pagination),
        filters_applied=FiltersApplied(**result.filters_applied),
    )


@router.get("/deals", response_model=DealSearchResponse)
def search_deals(
    request: Request,
    db: Session = Depends(get_db),
    viewer_id: str | None = Depends(get_optional_viewer_id),
) -> DealSearchResponse:
    """Search active deals."""
    result = _run_discovery(search_deals_service, db, _parse_filters(request, show_type="deals"), viewer_id)
    return DealSearchResponse(
        deals=result.deals.items,
        pagination=_serialize_pagination(result.deals.pagination),
        filters_applied=FiltersApplied(**result.filters_applied),
    )


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantDetailResponse)
def restaurant_detail(
    restaurant_id: int,
    db: Session = Depends(get_db),
    viewer_id: str | None = Depends(get_optional_viewer_id),
) -> RestaurantDetailResponse:
    """Return one active restaurant with its active deals."""
    try:
        return get_restaurant_detail(db, restaurant_id, viewer_id)
    except RestaurantNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found") from exc


@router.get("/restaurants/{restaurant_id}/bookmark-status", response_model=BookmarkStatusResponse)
def restaurant_bookmark_status(
    restaurant_id: int,
    db: Session = Depends(get_db),
    viewer_id: str = Depends(get_required_viewer_id),
) -> BookmarkStatusResponse:
    """Return the authenticated viewer's bookmark for a restaurant."""
    return get_restaurant_bookmark_status(db, restaurant_id, viewer_id)
