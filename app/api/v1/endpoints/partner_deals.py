"""Partner-facing deal status and schedule endpoints."""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import get_required_viewer_id
from app.db.session import get_db
from app.models.deal import Deal
from app.schemas.deal import DealScheduleUpdate, DealStatusResponse, DealStatusUpdate
from app.services.deal_lifecycle import (
    ArchivedDealError,
    DealLifecycleError,
    transition_deal_status,
    update_deal_schedule,
)

router: APIRouter = APIRouter()


def _get_owned_deal(db: Session, deal_id: int, viewer_id: str) -> Deal:
    deal: Deal | None = db.get(Deal, deal_id)
    if deal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deal not found")
    partner = deal.restaurant.partner
    if partner is None or partner.user_id != viewer_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return deal


def _raise_lifecycle_error(exc: DealLifecycleError) -> NoReturn:
    if isinstance(exc, ArchivedDealError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _serialize_deal(deal: Deal) -> DealStatusResponse:
    return DealStatusResponse(
        id=deal.id,
        title=deal.title,
        status=deal.status,
        start_date=deal.start_date,
        end_date=deal.end_date,
    )


@router.patch("/{deal_id}/status", response_model=DealStatusResponse)
def update_status(
    deal_id: int,
    payload: DealStatusUpdate,
    db: Session = Depends(get_db),
    viewer_id: str = Depends(get_required_viewer_id),
) -> DealStatusResponse:
    """Move an owned deal to a new status when the transition is allowed."""
    deal = _get_owned_deal(db, deal_id, viewer_id)
    try:
        deal = transition_deal_status(db, deal, payload.status)
    except DealLifecycleError as exc:
        _raise_lifecycle_error(exc)
    return _serialize_deal(deal)


@router.patch("/{deal_id}/schedule", response_model=DealStatusResponse)
def update_schedule(
    deal_id: int,
    payload: DealScheduleUpdate,
    db: Session = Depends(get_db),
    viewer_id: str = Depends(get_required_viewer_id),
) -> DealStatusResponse:
    """Change an owned deal's start/end dates."""
    deal = _get_owned_deal(db, deal_id, viewer_id)
    try:
        deal = update_deal_schedule(db, deal, payload.start_date, payload.end_date)
    except DealLifecycleError as exc:
        _raise_lifecycle_error(exc)
    return _serialize_deal(deal)
