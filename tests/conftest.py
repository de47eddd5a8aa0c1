from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import app.main as main_module
from app.core.config import settings
from app.core.security import create_access_token
from app.db import session as db_session
from app.db.base import Base
from app.models import (
    Cuisine,
    Deal,
    DealBookmark,
    DealCuisine,
    DealDietaryPreference,
    DietaryPreference,
    Partner,
    Restaurant,
    RestaurantBookmark,
)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


class DataBuilder:
    """Inserts rows through short-lived sessions and returns their ids."""

    def __init__(self, session_local: sessionmaker) -> None:
        self.session_local = session_local
        self._tick = 0

    def _next_created_at(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(minutes=self._tick)

    def _add(self, obj) -> int:
        with self.session_local() as db:
            db.add(obj)
            db.commit()
            return obj.id

    def partner(self, user_id: str, business_name: str = "Partner Co") -> int:
        return self._add(Partner(user_id=user_id, business_name=business_name))

    def cuisine(self, name: str) -> int:
        return self._add(Cuisine(name=name))

    def dietary(self, name: str) -> int:
        return self._add(DietaryPreference(name=name))

    def restaurant(
        self,
        name: str,
        latitude: float | None = None,
        longitude: float | None = None,
        *,
        partner_id: int | None = None,
        rating_avg: float = 0.0,
        rating_count: int = 0,
        is_active: bool = True,
        description: str | None = None,
    ) -> int:
        return self._add(
            Restaurant(
                name=name,
                description=description,
                latitude=latitude,
                longitude=longitude,
                partner_id=partner_id,
                rating_avg=rating_avg,
                rating_count=rating_count,
                is_active=is_active,
                created_at=self._next_created_at(),
            )
        )

    def deal(
        self,
        restaurant_id: int,
        title: str,
        *,
        status: str = "active",
        start_date: date | None = None,
        end_date: date | None = None,
        cuisine_ids: tuple[int, ...] = (),
        dietary_ids: tuple[int, ...] = (),
        description: str | None = None,
    ) -> int:
        today = date.today()
        with self.session_local() as db:
            deal = Deal(
                restaurant_id=restaurant_id,
                title=title,
                description=description,
                status=status,
                start_date=start_date or today - timedelta(days=1),
                end_date=end_date or today + timedelta(days=7),
                created_at=self._next_created_at(),
            )
            db.add(deal)
            db.flush()
            db.add_all(DealCuisine(deal_id=deal.id, cuisine_id=cuisine_id) for cuisine_id in cuisine_ids)
            db.add_all(
                DealDietaryPreference(deal_id=deal.id, dietary_preference_id=dietary_id) for dietary_id in dietary_ids
            )
            db.commit()
            return deal.id

    def restaurant_bookmark(self, user_id: str, restaurant_id: int, notify_on_deal: bool = False) -> int:
        return self._add(RestaurantBookmark(user_id=user_id, restaurant_id=restaurant_id, notify_on_deal=notify_on_deal))

    def deal_bookmark(self, user_id: str, deal_id: int) -> int:
        return self._add(DealBookmark(user_id=user_id, deal_id=deal_id))

    def deal_status(self, deal_id: int) -> str:
        with self.session_local() as db:
            deal = db.get(Deal, deal_id)
            assert deal is not None
            return deal.status


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    test_engine = _build_test_engine(tmp_path / "discovery.db")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_local(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_local: sessionmaker) -> Iterator[Session]:
    with session_local() as session:
        yield session


@pytest.fixture
def data(session_local: sessionmaker) -> DataBuilder:
    return DataBuilder(session_local)


@pytest.fixture
def client(engine: Engine, session_local: sessionmaker, monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", session_local)
    monkeypatch.setattr(settings, "deal_sweep_enabled", False)
    monkeypatch.setattr(settings, "seed_facets", False)

    with TestClient(main_module.app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return _auth_headers
