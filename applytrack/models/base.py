"""SQLAlchemy engine and session setup."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from applytrack.config import normalize_database_url


class Base(DeclarativeBase):
    pass


def make_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared across the request thread pool."""
    url = normalize_database_url(database_url)

    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, echo=False)

    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One connection for the whole process, or every session sees an empty DB
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool, echo=False)

    db_file = url.split("sqlite:///", 1)[-1]
    if db_file:
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args, echo=False)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(bind=engine)
