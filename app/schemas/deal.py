"""Deal lifecycle API schemas."""

from datetime import date
from typing import Literal

from pydantic import BaseModel

from app.schemas.search import CamelModel


class DealStatusUpdate(BaseModel):
    """Payload for a manual deal status change."""

    status: Literal["draft", "active", "expired", "archived"]


class DealScheduleUpdate(CamelModel):
    """Payload for changing a deal's date range."""

    start_date: date
    end_date: date


class DealStatusResponse(CamelModel):
    id: int
    title: str
    status: str
    start_date: date
    end_date: date
