"""Viewer bookmark ORM models."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class RestaurantBookmark(Base):
    """Restaurant saved by a user, optionally with new-deal notifications."""

    __tablename__ = "user_favorite_restaurants"
    __table_args__ = (UniqueConstraint("user_id", "restaurant_id", name="uniq_user_favorite_restaurant"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False)
    notify_on_deal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class DealBookmark(Base):
    """Deal saved by a user."""

    __tablename__ = "user_favorite_deals"
    __table_args__ = (UniqueConstraint("user_id", "deal_id", name="uniq_user_favorite_deal"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("deals.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
