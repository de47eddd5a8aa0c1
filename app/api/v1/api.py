"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import partner_deals, preferences, search

api_router: APIRouter = APIRouter()
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
api_router.include_router(partner_deals.router, prefix="/partner-deals", tags=["partner-deals"])
