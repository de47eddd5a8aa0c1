"""Facet catalogue API schemas."""

from app.schemas.search import CamelModel, FacetTag


class CuisineListResponse(CamelModel):
    cuisines: list[FacetTag]


class DietaryPreferenceListResponse(CamelModel):
    dietary_preferences: list[FacetTag]
