"""Database seeding helpers."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.facet import Cuisine, DietaryPreference

logger = logging.getLogger(__name__)

DEFAULT_CUISINES = (
    "American",
    "Chinese",
    "French",
    "Greek",
    "Indian",
    "Italian",
    "Japanese",
    "Korean",
    "Mediterranean",
    "Mexican",
    "Middle Eastern",
    "Thai",
    "Vietnamese",
)

DEFAULT_DIETARY_PREFERENCES = (
    "Dairy-Free",
    "Gluten-Free",
    "Halal",
    "Kosher",
    "Nut-Free",
    "Vegan",
    "Vegetarian",
)


def _missing_names(session: Session, column, names: tuple[str, ...]) -> list[str]:
    existing = {name.lower() for name in session.scalars(select(column)).all()}
    return [name for name in names if name.lower() not in existing]


def ensure_facet_seed(session: Session) -> int:
    """Insert the default cuisine and dietary catalogues; returns rows added."""
    cuisines = _missing_names(session, Cuisine.name, DEFAULT_CUISINES)
    dietary = _missing_names(session, DietaryPreference.name, DEFAULT_DIETARY_PREFERENCES)
    if not cuisines and not dietary:
        return 0

    session.add_all(Cuisine(name=name) for name in cuisines)
    session.add_all(DietaryPreference(name=name) for name in dietary)
    session.commit()
    logger.info("Seeded %s cuisines and %s dietary preferences", len(cuisines), len(dietary))
    return len(cuisines) + len(dietary)
