"""Deal ORM model."""

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

DEAL_STATUS_VALUES = ("draft", "active", "expired", "archived")


class Deal(Base):
    """Time-boxed promotion offered by a restaurant."""

    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_status_created_at", "status", "created_at"),
        Index("idx_deals_restaurant_status", "restaurant_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(*DEAL_STATUS_VALUES, name="deal_status"),
        nullable=False,
        default="draft",
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    restaurant: Mapped["Restaurant"] = relationship(back_populates="deals")
