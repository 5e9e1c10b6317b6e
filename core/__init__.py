"""Core package - Domain models, constants and exceptions."""

from .models import (
    Rectangle,
    EMPTY_RECTANGLE,
    Element,
    ImageSegment,
    ApplicationElementGroup,
    FormattedAddress,
    DevelopmentApplication,
    Gazetteer
)
from .constants import (
    LABEL_MAX_DISTANCE,
    SUBURB_MAX_DISTANCE,
    STREET_MAX_DISTANCE,
    STATE_MAX_DISTANCE,
    NON_ADDRESS_PREFIXES,
    DEFAULT_DESCRIPTION
)
from .exceptions import ScraperError, GazetteerError, PdfDecodeError, OcrError

__all__ = [
    'Rectangle',
    'EMPTY_RECTANGLE',
    'Element',
    'ImageSegment',
    'ApplicationElementGroup',
    'FormattedAddress',
    'DevelopmentApplication',
    'Gazetteer',
    'LABEL_MAX_DISTANCE',
    'SUBURB_MAX_DISTANCE',
    'STREET_MAX_DISTANCE',
    'STATE_MAX_DISTANCE',
    'NON_ADDRESS_PREFIXES',
    'DEFAULT_DESCRIPTION',
    'ScraperError',
    'GazetteerError',
    'PdfDecodeError',
    'OcrError'
]
