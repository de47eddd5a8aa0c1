"""Discovery API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class FacetTag(CamelModel):
    id: int
    name: str


class PartnerSummary(CamelModel):
    id: int
    business_name: str


class RestaurantDealSummary(CamelModel):
    """Active deal nested under a restaurant search result."""

    id: int
    title: str
    description: str | None
    restaurant_id: int
    start_date: date
    end_date: date
    cuisines: list[FacetTag]
    dietary_preferences: list[FacetTag]


class RestaurantSearchItem(CamelModel):
    """Restaurant search result enriched for the viewer."""

    id: int
    name: str
    description: str | None
    image_url: str | None
    street_address: str | None
    city: str | None
    province: str | None
    latitude: float | None
    longitude: float | None
    rating_avg: float
    rating_count: int
    created_at: datetime
    partner: PartnerSummary | None
    distance_km: float | None = None
    active_deals: list[RestaurantDealSummary]
    active_deals_count: int
    is_bookmarked: bool


class DealRestaurantSummary(CamelModel):
    id: int
    name: str
    image_url: str | None
    street_address: str | None
    city: str | None
    province: str | None
    latitude: float | None
    longitude: float | None
    rating_avg: float
    rating_count: int


class DealSearchItem(CamelModel):
    """Deal search result enriched for the viewer."""

    id: int
    title: str
    description: str | None
    status: str
    start_date: date
    end_date: date
    created_at: datetime
    restaurant: DealRestaurantSummary
    partner: PartnerSummary | None
    cuisines: list[FacetTag]
    dietary_preferences: list[FacetTag]
    is_bookmarked: bool
    distance_km: float | None = None


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_previous_page: bool


class FiltersApplied(CamelModel):
    """Echo of the normalized filters a search actually used."""

    query: str | None
    show_type: str
    cuisine_ids: list[int]
    dietary_preference_ids: list[int]
    latitude: float | None
    longitude: float | None
    radius_km: float | None
    has_active_deals: bool
    sort_by: str
    sort_order: str
    page: int
    limit: int


class DiscoveryPagination(CamelModel):
    restaurants: PaginationMeta
    deals: PaginationMeta


class DiscoveryResponse(CamelModel):
    """Combined restaurant and deal discovery response."""

    restaurants: list[RestaurantSearchItem]
    deals: list[DealSearchItem]
    pagination: DiscoveryPagination
    filters_applied: FiltersApplied


class RestaurantSearchResponse(CamelModel):
    restaurants: list[RestaurantSearchItem]
    pagination: PaginationMeta
    filters_applied: FiltersApplied


class DealSearchResponse(CamelModel):
    deals: list[DealSearchItem]
    pagination: PaginationMeta
    filters_applied: FiltersApplied


class RestaurantDetailDeal(CamelModel):
    id: int
    title: str
    description: str | None
    start_date: date
    end_date: date
    created_at: datetime


class RestaurantDetail(CamelModel):
    """Single active restaurant with contact details and bookmark state."""

    id: int
    name: str
    description: str | None
    image_url: str | None
    street_address: str | None
    city: str | None
    province: str | None
    postal_code: str | None
    phone: str | None
    latitude: float | None
    longitude: float | None
    rating_avg: float
    rating_count: int
    created_at: datetime
    partner: PartnerSummary | None
    is_bookmarked: bool


class RestaurantDetailResponse(CamelModel):
    restaurant: RestaurantDetail
    active_deals: list[RestaurantDetailDeal]


class BookmarkStatusResponse(CamelModel):
    restaurant_id: int
    is_bookmarked: bool
    notify_on_deal: bool
    bookmarked_at: datetime | None
