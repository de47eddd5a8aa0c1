"""SQL functions registered on SQLite connections."""

import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine

from app.services.geo import SQLITE_DISTANCE_FUNCTION, sqlite_haversine_km


@event.listens_for(Engine, "connect")
def register_sqlite_functions(dbapi_connection, connection_record) -> None:
    """Expose the distance function to SQLite so geo predicates run in SQL."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function(SQLITE_DISTANCE_FUNCTION, 4, sqlite_haversine_km, deterministic=True)
