"""
Repository pattern for data access.

Provides clean separation between data access and business logic.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from core.models import DevelopmentApplication
from data.db_models import DevelopmentApplicationRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of storing one application."""
    inserted: bool


class DevelopmentApplicationRepository:
    """Repository for DevelopmentApplicationRecord operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_reference(self, council_reference: str) -> Optional[DevelopmentApplicationRecord]:
        """Get a stored application by its council reference."""
        return self.session.get(DevelopmentApplicationRecord, council_reference)

    def upsert(self, application: DevelopmentApplication) -> UpsertResult:
        """
        Insert an application unless one with the same reference is stored.

        An existing row is left untouched, so running the scraper again over
        the same report has no effect.

        Args:
            application: Parsed application

        Returns:
            UpsertResult telling whether a row was inserted
        """
        if self.get_by_reference(application.application_number) is not None:
            logger.info(
                "Application already exists in the database: application_number=%s",
                application.application_number
            )
            return UpsertResult(inserted=False)

        self.session.add(DevelopmentApplicationRecord.from_application(application))
        self.session.flush()
        logger.info(
            "Inserted application: application_number=%s address=%r description=%r received_date=%s",
            application.application_number, application.address,
            application.description, application.received_date
        )
        return UpsertResult(inserted=True)

    def count(self) -> int:
        """Count stored applications."""
        return self.session.query(DevelopmentApplicationRecord).count()
