"""Database setup for Seriesarr using SQLModel."""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, applying the SQLite threading workaround when needed."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from worker threads via asyncio.to_thread
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


# Create engine
engine = build_engine(settings.database_url, echo=settings.debug)


def create_db_and_tables(bind: Engine = engine):
    """Create all database tables."""
    # Register table models on the metadata before creating
    import app.models.records  # noqa: F401

    SQLModel.metadata.create_all(bind)
