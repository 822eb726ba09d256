from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlmodel import SQLModel

from sitegrades.config.settings import settings


def build_engine(url: str) -> Engine:
    """Create the process-wide engine for `url`.

    Pool sizing only applies to server databases; sqlite manages its own pool.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        echo=False
    )


# engine for the configured database (postgresql unless DATABASE_URL says otherwise)
engine = build_engine(settings.database_url)

# session factory, one session per request
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create the `site` and `server` tables if they are missing."""
    # register the table models on SQLModel.metadata
    from sitegrades.models import site, server  # noqa: F401

    SQLModel.metadata.create_all(bind=bind)


def get_db() -> Iterator[Session]:
    """
    generates a new database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
