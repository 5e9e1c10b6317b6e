"""
Text utilities for the application scraping workflow.

Handles cleaning of OCR'd text.
"""
import re
from datetime import datetime
from typing import Iterable, Optional

from core.constants import (
    APPLICATION_NUMBER_SLASH_PATTERN,
    CONDENSE_PATTERN,
    DATE_OUTPUT_FORMAT,
    LIGATURES,
    NON_ADDRESS_PREFIXES,
    RECEIVED_DATE_PATTERN
)
from core.models import Element


def condense_text(text: Optional[str]) -> Optional[str]:
    """
    Condense text for label comparison.

    Removes whitespace and some punctuation (for example, the full stop from
    "Dev App No.") and converts to lowercase.

    Args:
        text: Raw element text

    Returns:
        Condensed text, or None if text is None
    """
    if text is None:
        return None
    return re.sub(CONDENSE_PATTERN, '', text.strip()).lower()


def collapse_whitespace(text: str) -> str:
    return re.sub(r'\s\s+', ' ', text.strip())


def expand_ligatures(text: str) -> str:
    """Replace typographic ligatures with their separate letters."""
    for ligature, letters in LIGATURES.items():
        text = text.replace(ligature, letters)
    return text


def join_element_text(elements: Iterable[Element]) -> str:
    """
    Join the text of already ordered elements with single spaces.

    Args:
        elements: Elements in reading order

    Returns:
        Joined text with ligatures expanded
    """
    text = ' '.join(element.text for element in elements)
    return expand_ligatures(collapse_whitespace(text))


def clean_address_text(text: str) -> str:
    """OCR often reads the "V" of a street name as a backslash and slash."""
    return text.replace('\\/', 'V')


def normalize_application_number(text: str) -> str:
    """
    Remove whitespace and repair the slash of an application number.

    For example, converts "17I2017" to "17/2017".
    """
    text = re.sub(r'\s', '', text)
    return re.sub(APPLICATION_NUMBER_SLASH_PATTERN, '/', text)


def is_non_address(text: str) -> bool:
    """Determine whether text is lot, hundred or cost detail rather than an address."""
    return text.startswith(NON_ADDRESS_PREFIXES)


def parse_received_date(text: str) -> Optional[datetime]:
    """
    Strictly parse a date in D/MM/YYYY format.

    The leading zero of the day may be omitted but the month must have two
    digits.

    Args:
        text: Element text

    Returns:
        Parsed datetime, or None if the text is not a valid date
    """
    match = re.match(RECEIVED_DATE_PATTERN, text.strip())
    if match is None:
        return None
    day, month, year = (int(group) for group in match.groups())
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def format_date(date: Optional[datetime]) -> str:
    """Format a date as YYYY-MM-DD, or an empty string when absent."""
    return date.strftime(DATE_OUTPUT_FORMAT) if date is not None else ""
