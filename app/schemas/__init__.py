"""Schema exports."""

from app.schemas.deal import DealScheduleUpdate, DealStatusResponse, DealStatusUpdate
from app.schemas.facet import CuisineListResponse, DietaryPreferenceListResponse
from app.schemas.search import (
    BookmarkStatusResponse,
    DealSearchItem,
    DealSearchResponse,
    DiscoveryResponse,
    FacetTag,
    FiltersApplied,
    PaginationMeta,
    RestaurantDetailResponse,
    RestaurantSearchItem,
    RestaurantSearchResponse,
)

__all__ = [
    "BookmarkStatusResponse",
    "CuisineListResponse",
    "DealScheduleUpdate",
    "DealSearchItem",
    "DealSearchResponse",
    "DealStatusResponse",
    "DealStatusUpdate",
    "DietaryPreferenceListResponse",
    "DiscoveryResponse",
    "FacetTag",
    "FiltersApplied",
    "PaginationMeta",
    "RestaurantDetailResponse",
    "RestaurantSearchItem",
    "RestaurantSearchResponse",
]
