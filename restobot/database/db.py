# restobot/database/db.py
"""Database connection and session management."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from restobot.database.models import Base
from restobot.config import get_settings


def make_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for the configured (or given) database URL."""
    url = url or get_settings().database_url
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, pool_recycle=1800)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine):
    """Create all tables."""
    Base.metadata.create_all(bind=engine)
