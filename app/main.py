"""FastAPI entrypoint for the deal discovery service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.v1.api import api_router
from app.core.config import settings
from app.db.base import Base
from app.db.seed import ensure_facet_seed
from app.db.session import SessionLocal, engine
from app.services.deal_scheduler import DealStatusScheduler

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")

deal_scheduler: DealStatusScheduler | None = None


@app.on_event("startup")
def startup() -> None:
    global deal_scheduler

    logger.info("[BOOTSTRAP] starting %s (env=%s)", settings.app_name, settings.app_env)
    Base.metadata.create_all(bind=engine)
    if settings.seed_facets:
        with SessionLocal() as session:
            try:
                ensure_facet_seed(session)
            except Exception:
                logger.exception("[BOOTSTRAP] Facet seed failed; continuing startup.")

    if settings.deal_sweep_enabled:
        deal_scheduler = DealStatusScheduler(settings.deal_sweep_interval_seconds)
        deal_scheduler.start()
        logger.info("[BOOTSTRAP] deal status sweep every %ss", settings.deal_sweep_interval_seconds)
    else:
        logger.info("[BOOTSTRAP] deal status sweep disabled")


@app.on_event("shutdown")
def shutdown() -> None:
    global deal_scheduler

    if deal_scheduler is not None:
        deal_scheduler.stop()
        deal_scheduler = None


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
