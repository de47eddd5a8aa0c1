"""Application models package."""

from app.models.bookmark import DealBookmark, RestaurantBookmark
from app.models.deal import DEAL_STATUS_VALUES, Deal
from app.models.facet import Cuisine, DealCuisine, DealDietaryPreference, DietaryPreference
from app.models.restaurant import Partner, Restaurant

__all__ = [
    "Partner", "Restaurant", "Deal", "DEAL_STATUS_VALUES", "Cuisine", "DietaryPreference",
    "DealCuisine", "DealDietaryPreference", "RestaurantBookmark", "DealBookmark",
]
