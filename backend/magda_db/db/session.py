"""Database engine and session factory."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from magda_db.config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine for a SQLAlchemy URL."""

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, future=True, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to an engine."""

    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


engine = build_engine(get_settings().database_url)
SessionLocal = build_session_factory(engine)
