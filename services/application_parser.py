"""
Application Parser - Turns one group of elements into a development application.

Runs the field extractors over an ApplicationElementGroup, corrects the
address against the gazetteer and assembles the final record, rejecting
groups that do not yield a usable application number and address.
"""
import logging
from datetime import date
from typing import List, Optional

from core.models import (
    ApplicationElementGroup,
    DevelopmentApplication,
    Element,
    FormattedAddress,
    Gazetteer
)
from services.address_service import format_address
from spatial.extraction import (
    extract_application_number,
    extract_description,
    extract_received_date,
    find_assessment_number_element,
    find_line_above,
    find_middle_element
)
from utils.text_utils import clean_address_text, is_non_address, join_element_text

logger = logging.getLogger(__name__)


def _line_text(elements: List[Element]) -> str:
    return clean_address_text(join_element_text(elements))


def extract_address(
    elements: List[Element],
    start_element: Element,
    middle_element: Element,
    gazetteer: Gazetteer,
    address_params: Optional[dict] = None
) -> Optional[FormattedAddress]:
    """
    Find and correct the address of an application.

    The address is the line immediately above the "Assessment Number" label.
    When that line holds no street (for example, only a suburb) the line
    above it is assumed to hold the street and the address is formatted
    again with that line in front.

    Args:
        elements: Elements of one application
        start_element: Row label element
        middle_element: Middle anchor element
        gazetteer: Reference tables
        address_params: Keyword arguments for find_line_above

    Returns:
        FormattedAddress, or None if no address line was found or the line
        holds lot, hundred or cost detail instead of an address
    """
    address_params = address_params or {}

    assessment_element = find_assessment_number_element(elements, start_element)
    if assessment_element is None:
        logger.info("Rejected application group: reason=no_assessment_number_label")
        return None

    address_elements = find_line_above(elements, assessment_element, middle_element, **address_params)
    if not address_elements:
        logger.info("Rejected application group: reason=no_address_line")
        return None

    address = _line_text(address_elements)
    if is_non_address(address):
        logger.info("Rejected application group: reason=non_address_text text=%r", address)
        return None

    formatted_address = format_address(address, gazetteer)
    logger.debug(
        "Address before: %r (has_suburb=%s, has_street=%s)",
        formatted_address.text, formatted_address.has_suburb, formatted_address.has_street
    )

    if not formatted_address.has_street:
        street_elements = find_line_above(elements, address_elements[0], middle_element, **address_params)
        street = _line_text(street_elements)
        if street and not is_non_address(street):
            formatted_address = format_address(f"{street} {address}", gazetteer)
            logger.debug(
                "Address after adding street %r: %r (has_suburb=%s, has_street=%s)",
                street, formatted_address.text, formatted_address.has_suburb, formatted_address.has_street
            )

    return formatted_address


def assemble_application(
    application_number: str,
    formatted_address: Optional[FormattedAddress],
    description: str,
    received_date: str,
    information_url: str,
    comment_url: str,
    scrape_date: Optional[str] = None
) -> Optional[DevelopmentApplication]:
    """
    Combine extracted fields into a development application.

    Returns:
        DevelopmentApplication, or None if the application number or the
        address is unusable
    """
    if application_number == "":
        logger.info("Rejected application: reason=empty_application_number")
        return None

    if formatted_address is None:
        logger.info("Rejected application: application_number=%s reason=no_address", application_number)
        return None

    if not formatted_address.has_suburb or formatted_address.text == "":
        logger.info(
            "Rejected application: application_number=%s reason=unrecognised_address text=%r",
            application_number, formatted_address.text
        )
        return None

    if is_non_address(formatted_address.text):
        logger.info(
            "Rejected application: application_number=%s reason=non_address_text text=%r",
            application_number, formatted_address.text
        )
        return None

    return DevelopmentApplication(
        application_number=application_number,
        address=formatted_address.text,
        description=description,
        information_url=information_url,
        comment_url=comment_url,
        scrape_date=scrape_date or date.today().isoformat(),
        received_date=received_date
    )


def parse_application_group(
    group: ApplicationElementGroup,
    gazetteer: Gazetteer,
    information_url: str,
    comment_url: str,
    address_params: Optional[dict] = None,
    scrape_date: Optional[str] = None
) -> Optional[DevelopmentApplication]:
    """
    Parse the details of a single development application.

    Args:
        group: Elements of one application and its row label
        gazetteer: Reference tables
        information_url: URL of the report the application came from
        comment_url: Where the public can comment on the application
        address_params: Keyword arguments for find_line_above
        scrape_date: Date of the scrape as YYYY-MM-DD (default: today)

    Returns:
        DevelopmentApplication, or None if the group was rejected
    """
    elements = group.elements
    start_element = group.start_element

    # The "Applicant" (or "Builder") label determines where the description
    # starts and where the application number and address end
    middle_element = find_middle_element(elements, start_element)
    if middle_element is None:
        logger.info("Rejected application group: reason=no_applicant_or_builder_label")
        return None

    application_number = extract_application_number(elements, start_element, middle_element)
    if application_number == "":
        logger.info("Rejected application group: reason=empty_application_number")
        return None

    date_element, received_date = extract_received_date(elements, start_element, middle_element)
    description_top = start_element if date_element is None else date_element
    description = extract_description(elements, description_top, middle_element)

    formatted_address = extract_address(elements, start_element, middle_element, gazetteer, address_params)

    application = assemble_application(
        application_number=application_number,
        formatted_address=formatted_address,
        description=description,
        received_date=received_date,
        information_url=information_url,
        comment_url=comment_url,
        scrape_date=scrape_date
    )
    if application is not None:
        logger.info(
            "Parsed application: application_number=%s received_date=%s address=%r",
            application.application_number, application.received_date, application.address
        )
    return application
