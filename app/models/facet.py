"""Cuisine and dietary preference reference tables and deal tag edges."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Cuisine(Base):
    __tablename__ = "cuisines"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class DietaryPreference(Base):
    __tablename__ = "dietary_preferences"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class DealCuisine(Base):
    """Tags a deal with a cuisine."""

    __tablename__ = "deal_cuisines"
    __table_args__ = (UniqueConstraint("deal_id", "cuisine_id", name="uniq_deal_cuisine_pair"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("deals.id"), nullable=False, index=True)
    cuisine_id: Mapped[int] = mapped_column(ForeignKey("cuisines.id"), nullable=False)


class DealDietaryPreference(Base):
    """Tags a deal with a dietary preference."""

    __tablename__ = "deal_dietary_preferences"
    __table_args__ = (
        UniqueConstraint("deal_id", "dietary_preference_id", name="uniq_deal_dietary_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("deals.id"), nullable=False, index=True)
    dietary_preference_id: Mapped[int] = mapped_column(ForeignKey("dietary_preferences.id"), nullable=False)
