"""
Database session management for the fleet backend.

Owns the engine and the scoped session factory so blueprints and services
can share them without importing the app module. ``init_db`` creates the
fleet tables: ``fuel`` (the fuel ledger), ``drivers`` (editable driver
contacts) and ``report_snapshots`` (generated vehicle reports).
"""

import logging
import time

from config import Config
from flask import g
from models import Base, get_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import scoped_session, sessionmaker

logger = logging.getLogger(__name__)

engine = get_engine(Config.DATABASE_URL)
SessionLocal = scoped_session(sessionmaker(bind=engine))

SLOW_QUERY_THRESHOLD_MS = 500


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log queries slower than SLOW_QUERY_THRESHOLD_MS."""
    duration_ms = (time.time() - conn.info["query_start_time"].pop(-1)) * 1000

    if duration_ms > SLOW_QUERY_THRESHOLD_MS:
        truncated_query = statement[:200] + "..." if len(statement) > 200 else statement
        logger.warning(
            f"Slow query detected: {duration_ms:.2f}ms - {truncated_query}", extra={"duration_ms": duration_ms}
        )


def init_db():
    """Create any missing tables (fuel, drivers, report_snapshots)."""
    Base.metadata.create_all(engine)


def get_db():
    """
    Get database session for the current request.

    The session lives on Flask's ``g`` and is released in ``close_db``.
    """
    if "db" not in g:
        g.db = SessionLocal()
    return g.db


def close_db(exception=None):
    db = g.pop("db", None)
    if db is not None:
        SessionLocal.remove()


def init_app(app):
    """Register session teardown and make sure the schema exists."""
    app.teardown_appcontext(close_db)
    init_db()
