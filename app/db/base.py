"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase

from app.db import functions as _functions  # noqa: F401


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import bookmark as _bookmark  # noqa: E402,F401
from app.models import deal as _deal  # noqa: E402,F401
from app.models import facet as _facet  # noqa: E402,F401
from app.models import restaurant as _restaurant  # noqa: E402,F401
