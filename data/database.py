"""
Database connection and session management.

Provides utilities for creating database engine, sessions, and table initialization.
"""
import logging
import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from .db_models import Base

logger = logging.getLogger(__name__)


# Default database (can be overridden via environment variable)
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///data.sqlite')


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, database_url: str = None):
        """
        Initialize database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses DATABASE_URL env var
                         or the default SQLite file.
        """
        self.database_url = database_url or DATABASE_URL

        if self.database_url.startswith('sqlite'):
            self.engine = create_engine(
                self.database_url,
                connect_args={'check_same_thread': False},
                echo=False  # Set to True for SQL query logging
            )
        else:
            self.engine = create_engine(self.database_url, echo=False)

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created at: %s", self.database_url)

    def drop_tables(self):
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("Database tables dropped from: %s", self.database_url)

    def get_session(self) -> Session:
        """
        Get a new database session.

        Remember to close the session when done, or use the session
        context manager instead.
        """
        return self.SessionLocal()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Automatically commits on success and rolls back on exception.

        Usage:
            with db_manager.session() as session:
                # ... use session ...
                # Automatically commits when exiting normally
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

