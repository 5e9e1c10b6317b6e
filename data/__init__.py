"""Data access layer - Database models, connections and reference data."""

from .db_models import Base, DevelopmentApplicationRecord
from .database import DatabaseManager
from .repositories import DevelopmentApplicationRepository, UpsertResult
from .gazetteer import load_gazetteer
from .element_cache import ElementCache

__all__ = [
    # Models
    'Base',
    'DevelopmentApplicationRecord',

    # Database
    'DatabaseManager',

    # Repositories
    'DevelopmentApplicationRepository',
    'UpsertResult',

    # Reference data
    'load_gazetteer',
    'ElementCache'
]
