"""Facet catalogue endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.facet import CuisineListResponse, DietaryPreferenceListResponse
from app.schemas.search import FacetTag
from app.services.facet_resolver import list_cuisines, list_dietary_preferences

router: APIRouter = APIRouter()


@router.get("/cuisines", response_model=CuisineListResponse)
def get_cuisines(db: Session = Depends(get_db)) -> CuisineListResponse:
    """Return every cuisine usable as a search facet."""
    return CuisineListResponse(
        cuisines=[FacetTag(id=cuisine.id, name=cuisine.name) for cuisine in list_cuisines(db)]
    )


@router.get("/dietary", response_model=DietaryPreferenceListResponse)
def get_dietary_preferences(db: Session = Depends(get_db)) -> DietaryPreferenceListResponse:
    """Return every dietary preference usable as a search facet."""
    return DietaryPreferenceListResponse(
        dietary_preferences=[FacetTag(id=row.id, name=row.name) for row in list_dietary_preferences(db)]
    )
