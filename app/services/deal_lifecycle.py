"""Deal status transitions: the date-driven sweep and manual partner requests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from sqlalchemy import and_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.db import session as db_session
from app.models.deal import Deal

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "draft": {"active", "archived"},
    "active": {"expired", "archived"},
    "expired": {"active", "archived"},
    "archived": set(),
}


class DealLifecycleError(Exception):
    """Base class for rejected deal status changes."""


class InvalidDealTransitionError(DealLifecycleError):
    """Raised when a requested status change is not an allowed transition."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition deal from '{current}' to '{requested}'")


class ArchivedDealError(DealLifecycleError):
    """Raised when an archived deal would be modified."""

    def __init__(self, deal_id: int) -> None:
        self.deal_id = deal_id
        super().__init__(f"Deal {deal_id} is archived and cannot be modified")


class InvalidDealScheduleError(DealLifecycleError):
    """Raised when a deal's start date falls after its end date."""


def can_transition(current: str, new: str) -> bool:
    """Return whether a deal can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def ensure_deal_editable(deal: Deal) -> None:
    """Reject any modification of an archived deal."""
    if deal.status == "archived":
        raise ArchivedDealError(deal.id)


def transition_deal_status(db: Session, deal: Deal, new_status: str) -> Deal:
    """Apply a manual status change requested by partner management."""
    ensure_deal_editable(deal)
    if not can_transition(deal.status, new_status):
        raise InvalidDealTransitionError(deal.status, new_status)

    previous = deal.status
    deal.status = new_status
    db.add(deal)
    db.commit()
    db.refresh(deal)
    logger.info("Deal #%s moved %s -> %s by partner request", deal.id, previous, new_status)
    return deal


def update_deal_schedule(db: Session, deal: Deal, start_date: date, end_date: date) -> Deal:
    """Change a deal's date range; an expired deal extended past today reactivates on the next sweep."""
    ensure_deal_editable(deal)
    if start_date > end_date:
        raise InvalidDealScheduleError("start_date must be on or before end_date")

    deal.start_date = start_date
    deal.end_date = end_date
    db.add(deal)
    db.commit()
    db.refresh(deal)
    return deal


@dataclass
class SweepReport:
    """Rows moved per sweep phase."""

    run_date: date
    draft_to_active: int = 0
    active_to_expired: int = 0
    expired_to_active: int = 0
    failed_phases: list[str] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return self.draft_to_active + self.active_to_expired + self.expired_to_active

    @property
    def succeeded(self) -> bool:
        return not self.failed_phases


@dataclass(frozen=True)
class SweepPhase:
    name: str
    from_status: str
    to_status: str
    condition: Callable[[date], ColumnElement[bool]]


def _within_window(today: date) -> ColumnElement[bool]:
    return and_(Deal.start_date <= today, Deal.end_date >= today)


def _past_end(today: date) -> ColumnElement[bool]:
    return Deal.end_date < today


SWEEP_PHASES: tuple[SweepPhase, ...] = (
    SweepPhase("draft_to_active", "draft", "active", _within_window),
    SweepPhase("active_to_expired", "active", "expired", _past_end),
    SweepPhase("expired_to_active", "expired", "active", _within_window),
)


def _run_phase(db: Session, phase: SweepPhase, today: date) -> int:
    """Move every matching row in a single bulk update and return the row count."""
    result = db.execute(
        update(Deal)
        .where(Deal.status == phase.from_status, phase.condition(today))
        .values(status=phase.to_status, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def run_deal_status_sweep(
    session_factory: Callable[[], Session] | None = None,
    today: date | None = None,
) -> SweepReport:
    """Advance deal statuses by calendar date.

    Each phase commits in its own transaction. A failing phase is rolled back,
    logged and reported; the remaining phases still run and the next scheduled
    sweep retries from scratch.
    """
    factory = session_factory or db_session.new_session
    run_date = today or date.today()
    report = SweepReport(run_date=run_date)

    for phase in SWEEP_PHASES:
        with factory() as db:
            try:
                moved = _run_phase(db, phase, run_date)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Deal status sweep phase %s failed; will retry next run", phase.name)
                report.failed_phases.append(phase.name)
                continue

        setattr(report, phase.name, moved)
        if moved:
            logger.info("Deal status sweep %s -> %s: %d deal(s)", phase.from_status, phase.to_status, moved)

    if report.total_changes == 0 and report.succeeded:
        logger.debug("Deal status sweep for %s: no status changes needed", run_date)
    else:
        logger.info(
            "Deal status sweep for %s: draft->active=%d active->expired=%d expired->active=%d failed=%s",
            run_date,
            report.draft_to_active,
            report.active_to_expired,
            report.expired_to_active,
            report.failed_phases or "none",
        )
    return report
