"""
Database models for scraped development applications.

The table layout is shared with other council scrapers, so column names
follow the common planning alerts schema rather than the domain model.
"""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import declarative_base

from core.models import DevelopmentApplication

Base = declarative_base()


class DevelopmentApplicationRecord(Base):
    """A stored development application, keyed by council reference."""

    __tablename__ = 'data'

    council_reference = Column(String, primary_key=True)
    address = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    info_url = Column(Text, nullable=False)
    comment_url = Column(Text, nullable=False)
    date_scraped = Column(String, nullable=False)
    date_received = Column(String, nullable=False, default="")

    # Not published by this council; kept for schema compatibility
    on_notice_from = Column(String, nullable=True)
    on_notice_to = Column(String, nullable=True)

    def __repr__(self):
        return f"<DevelopmentApplicationRecord(council_reference={self.council_reference}, address={self.address})>"

    @classmethod
    def from_application(cls, application: DevelopmentApplication) -> "DevelopmentApplicationRecord":
        """Create a record from a parsed application."""
        return cls(
            council_reference=application.application_number,
            address=application.address,
            description=application.description,
            info_url=application.information_url,
            comment_url=application.comment_url,
            date_scraped=application.scrape_date,
            date_received=application.received_date,
            on_notice_from=None,
            on_notice_to=None
        )

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'council_reference': self.council_reference,
            'address': self.address,
            'description': self.description,
            'info_url': self.info_url,
            'comment_url': self.comment_url,
            'date_scraped': self.date_scraped,
            'date_received': self.date_received,
            'on_notice_from': self.on_notice_from,
            'on_notice_to': self.on_notice_to
        }
