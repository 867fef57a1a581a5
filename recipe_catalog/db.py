"""Database connection and session management."""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# Indexes the ORM metadata can't express portably
POSTGRES_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_recipes_title "
    "ON recipes USING gin(to_tsvector('english', title))",
    "CREATE INDEX IF NOT EXISTS idx_recipes_nutrients "
    "ON recipes USING gin(nutrients)",
]


class Database:
    """Owns the engine (connection pool) and the session factory.

    Built once by the application lifespan and disposed on shutdown.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.engine: Engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create a pooled PostgreSQL-backed database from settings."""
        return cls(
            settings.sqlalchemy_url,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_pre_ping=True,  # Verify connections before using
            echo=False,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager for a unit of work.

        Usage:
            with database.session() as db:
                db.query(...)
        """
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def check_connection(self) -> None:
        """Run a trivial query; raises if no connection can be obtained."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def create_schema(self) -> None:
        """Create tables and indexes that don't exist yet."""
        # Import models so they register with Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        if self.engine.dialect.name == "postgresql":
            with self.engine.begin() as conn:
                for statement in POSTGRES_INDEXES:
                    conn.execute(text(statement))
        logger.info("Database initialized successfully")

    def dispose(self) -> None:
        """Dispose of the engine and all pooled connections."""
        self.engine.dispose()
