"""
Address Service - Corrects OCR'd addresses using the gazetteer.

The trailing tokens of an address are matched against known suburb names,
the street suffix is expanded and the street name is corrected against
known street names, allowing for a few OCR spelling errors at each step.
"""
import logging
import re

from core.constants import (
    MALFORMED_POSTCODES,
    MAX_SUBURB_TOKENS,
    POSTCODE_PATTERN,
    STATE_ABBREVIATION,
    STATE_MAX_DISTANCE,
    STREET_MAX_DISTANCE,
    SUBURB_MAX_DISTANCE
)
from core.models import FormattedAddress, Gazetteer
from utils.fuzzy import closest_match

logger = logging.getLogger(__name__)


def format_address(address: str, gazetteer: Gazetteer) -> FormattedAddress:
    """
    Format (and correct) an address.

    For example, "12 Smith RD CALLINGTON SA 5254" becomes
    "12 Smith Road, SA 5254" when the gazetteer knows the suburb
    "callington" as "SA 5254" and the suffix "rd" as "Road".

    Args:
        address: Address text as recognised
        gazetteer: Reference tables

    Returns:
        FormattedAddress; has_suburb is False (and the text unchanged) when
        no suburb could be recognised
    """
    address = address.strip()
    if address == "":
        return FormattedAddress(text="", has_suburb=False, has_street=False)

    tokens = address.split()

    # An invalid post code of "0" (or "O" or "D") commonly appears at the end
    # of an address, for example "Bremer Range RD CALLINGTON 0". The post code
    # is derived from the suburb instead.
    if tokens and (re.match(POSTCODE_PATTERN, tokens[-1]) or tokens[-1] in MALFORMED_POSTCODES):
        tokens.pop()

    # The state is also determined by the suburb
    if tokens and closest_match(tokens[-1], [STATE_ABBREVIATION], STATE_MAX_DISTANCE, case_sensitive=True) is not None:
        tokens.pop()

    # Take tokens from the end until they form a known suburb name
    suburb_state_and_post_code = None
    for count in range(1, min(MAX_SUBURB_TOKENS, len(tokens)) + 1):
        suburb_match = closest_match(' '.join(tokens[-count:]), gazetteer.suburb_names.keys(), SUBURB_MAX_DISTANCE)
        if suburb_match is not None:
            suburb_state_and_post_code = gazetteer.suburb_names[suburb_match]
            del tokens[-count:]
            break

    if suburb_state_and_post_code is None:
        logger.debug("No suburb recognised in address %r", address)
        return FormattedAddress(text=address, has_suburb=False, has_street=False)

    # Expand an abbreviated street suffix, for example "RD" to "Road"
    suffix_abbreviation = tokens.pop() if tokens else ""
    suffix = gazetteer.street_suffixes.get(suffix_abbreviation.lower(), suffix_abbreviation)

    street_name = ' '.join(tokens + [suffix]).strip()
    if street_name:
        street_match = closest_match(street_name, gazetteer.street_names.keys(), STREET_MAX_DISTANCE)
        if street_match is not None:
            street_name = street_match

    separator = ", " if street_name else ""
    return FormattedAddress(
        text=f"{street_name}{separator}{suburb_state_and_post_code}".strip(),
        has_suburb=True,
        has_street=len(street_name) > 0
    )
