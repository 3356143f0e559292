"""Database engine and session management for recipe storage."""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from recipe_sections.config import get_settings
from recipe_sections.models.base import Base

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    settings = get_settings()
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.sql_echo,
    }
    if database_url.startswith("sqlite"):
        # Sessions may be used from threads other than the creating one
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=settings.db_pool_timeout,
        )
    return options


class Database:
    """Owns the engine and hands out transactional sessions for the recipes table."""

    def __init__(self, database_url: str | None = None, pool_size: int | None = None, max_overflow: int | None = None):
        """
        Initialize database connection.

        Args:
            database_url: Database connection URL. If None, reads from settings.
                         Supports PostgreSQL and SQLite.
            pool_size: Pool size for server databases. If None, uses settings.
            max_overflow: Connections allowed beyond pool_size. If None, uses settings.
        """
        settings = get_settings()
        database_url = database_url or settings.get_database_url()
        pool_size = settings.db_pool_size if pool_size is None else pool_size
        max_overflow = settings.db_max_overflow if max_overflow is None else max_overflow

        self.engine = create_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow)
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.debug("Opened recipe database at %s", make_url(database_url).render_as_string(hide_password=True))

    def create_tables(self) -> None:
        """Create the recipes table if it does not exist."""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """Drop the recipes table."""
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Recipe database is unreachable", exc_info=True)
            return False

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with automatic transaction handling.

        Usage:
            with db.session() as session:
                RecipeService(session).save_recipe(payload)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database instance
_db: Database | None = None


def get_db(database_url: str | None = None) -> Database:
    """
    Get or create the global database instance.

    Args:
        database_url: Database connection URL. Only used on first call.

    Returns:
        Database instance
    """
    global _db
    if _db is None:
        _db = Database(database_url)
    return _db


def reset_db() -> None:
    """Forget the global database instance so the next get_db() opens a new one."""
    global _db
    if _db is not None:
        _db.engine.dispose()
    _db = None
