"""
Field Extraction Module

Locates the fields of a single development application within its group of
elements using their positions:
- Middle anchor: the "Applicant" (or "Builder") label separating the left
  hand columns (application number, address) from the description
- Application number: text to the right of the row label
- Received date: leftmost date near the row label
- Description: text between the label row and the middle anchor
- Address: the line above the "Assessment Number" label
"""
import logging
from functools import cmp_to_key
from typing import List, Optional, Tuple

from core.constants import (
    ASSESSMENT_LABELS,
    ASSESSMENT_NUMBER_LABELS,
    DEFAULT_DESCRIPTION,
    LABEL_MAX_DISTANCE,
    MIDDLE_ANCHOR_WORDS,
    NUMBER_LABELS
)
from core.models import Element
from utils.bbox_utils import area, containment_ratio, right_neighbor, vertical_overlap_percentage
from utils.fuzzy import closest_match
from utils.text_utils import format_date, join_element_text, normalize_application_number, parse_received_date

logger = logging.getLogger(__name__)


# Elements within this fraction of the middle anchor's width to its left
# still belong to the description column.
MIDDLE_MARGIN_FACTOR = 0.2


def _compare_with_tolerance(tolerance_factor: float):
    """
    Build a comparator ordering elements by row and then by X co-ordinate.

    Two elements are on the same row when their Y co-ordinates differ by no
    more than tolerance_factor times the larger of their heights.
    """
    def compare(a: Element, b: Element) -> int:
        tolerance = max(a.height, b.height) * tolerance_factor
        if a.y > b.y + tolerance:
            return 1
        if a.y < b.y - tolerance:
            return -1
        if a.x > b.x:
            return 1
        if a.x < b.x:
            return -1
        return 0
    return compare


def sort_into_lines(elements: List[Element], tolerance_factor: float) -> List[Element]:
    """Sort elements into reading order, tolerating slightly misaligned rows."""
    return sorted(elements, key=cmp_to_key(_compare_with_tolerance(tolerance_factor)))


def find_middle_element(elements: List[Element], start_element: Element) -> Optional[Element]:
    """
    Find the "Applicant" label below the row label, or else the "Builder" label.

    Args:
        elements: Elements of one application
        start_element: Row label element

    Returns:
        The anchor element, or None if neither label was recognised
    """
    for word in MIDDLE_ANCHOR_WORDS:
        anchor = next(
            (e for e in elements if e.y > start_element.y and e.text.strip().lower() == word),
            None
        )
        if anchor is not None:
            return anchor
        logger.debug("No %r label found below the row label", word)
    return None


def extract_application_number(
    elements: List[Element],
    start_element: Element,
    middle_element: Element
) -> str:
    """
    Get the application number printed to the right of the row label.

    Only elements overlapping the label vertically by more than 50% and
    ending before the middle anchor's column are used.

    Returns:
        The application number (for example "17/2017"), or "" if not found
    """
    row_elements = [
        e for e in elements
        if e.x > start_element.right
        and e.x < middle_element.x - MIDDLE_MARGIN_FACTOR * middle_element.width
        and vertical_overlap_percentage(e, start_element) > 50
    ]
    row_elements.sort(key=lambda e: e.x)
    return normalize_application_number(join_element_text(row_elements))


def extract_received_date(
    elements: List[Element],
    start_element: Element,
    middle_element: Element
) -> Tuple[Optional[Element], str]:
    """
    Find the lodged date near the row label.

    The date may be offset vertically from the label, so the search covers
    one label height above to two label heights below. The leftmost date is
    taken, which favours the lodged date over the decision date.

    Returns:
        Tuple of (date element or None, date as YYYY-MM-DD or "")
    """
    date_elements = [
        e for e in elements
        if e.x >= middle_element.x
        and e.bottom > start_element.y - start_element.height
        and e.y < start_element.y + 2 * start_element.height
        and parse_received_date(e.text) is not None
    ]
    if not date_elements:
        return None, ""

    date_element = min(date_elements, key=lambda e: e.x)
    return date_element, format_date(parse_received_date(date_element.text))


def extract_description(
    elements: List[Element],
    top_element: Element,
    middle_element: Element
) -> str:
    """
    Get the description text above the middle anchor.

    Args:
        elements: Elements of one application
        top_element: Received date element (or the row label if no date)
        middle_element: Middle anchor element

    Returns:
        The description, or a placeholder if no text was found
    """
    description_elements = [
        e for e in elements
        if e.y > top_element.bottom
        and e.y < middle_element.y
        and e.x > middle_element.x - MIDDLE_MARGIN_FACTOR * middle_element.width
    ]

    # A tolerance of two thirds of a line keeps text such as the hyphen in
    # "Retail Fitout - Shop 7" on its line
    description = join_element_text(sort_into_lines(description_elements, 2 / 3))
    return description if description else DEFAULT_DESCRIPTION


def find_assessment_number_element(elements: List[Element], start_element: Element) -> Optional[Element]:
    """
    Find the "Assessment Number" (or "Asses Num") label below the row label.

    The label may be recognised as one element or as two adjacent elements.
    """
    below = [e for e in elements if e.y > start_element.y]

    for element in below:
        if closest_match(element.text, ASSESSMENT_NUMBER_LABELS, LABEL_MAX_DISTANCE) is not None:
            return element

    for element in below:
        if closest_match(element.text, ASSESSMENT_LABELS, LABEL_MAX_DISTANCE) is None:
            continue
        neighbor = right_neighbor(elements, element)
        if neighbor is not None and closest_match(neighbor.text, NUMBER_LABELS, LABEL_MAX_DISTANCE) is not None:
            return element

    return None


def find_line_above(
    elements: List[Element],
    below_element: Element,
    middle_element: Element,
    gap_threshold: float = 50,
    gap_min_confidence: float = 60,
    containment_ratio_threshold: float = 0.9
) -> List[Element]:
    """
    Get the elements on the line above an element, left of the middle anchor.

    The lowest element at least a line above below_element (and in the left
    half of the area before the middle anchor) determines the line. Small
    recognition artefacts overlapping larger words are dropped, and the line
    is cut at the first large gap between two confidently recognised words,
    since text after such a gap belongs to a description that has drifted
    left.

    Args:
        elements: Elements of one application
        below_element: Element the line must lie above
        middle_element: Middle anchor element
        gap_threshold: Horizontal gap in pixels that ends the line
        gap_min_confidence: Confidence both words around a gap must have
        containment_ratio_threshold: Fraction of an element's area inside a
            larger element above which it is treated as an artefact

    Returns:
        Elements of the line in reading order (empty if none)
    """
    right_limit = middle_element.x - MIDDLE_MARGIN_FACTOR * middle_element.width
    candidates = [
        e for e in elements
        if e.y < below_element.y - below_element.height and e.x < right_limit
    ]

    # Elements on the far right tend to be descriptions that have moved too
    # far left, so only the left half is used to find the line
    bottom_element = None
    for e in candidates:
        if e.x < middle_element.x / 2 and (bottom_element is None or e.y > bottom_element.y):
            bottom_element = e
    if bottom_element is None:
        return []

    line = [
        e for e in candidates
        if e.y >= bottom_element.y - max(e.height, bottom_element.height)
    ]
    line = sort_into_lines(line, 1)

    line = [
        e for e in line
        if not any(
            area(other) > 2 * area(e)
            and area(e) > 0
            and containment_ratio(e, other) > containment_ratio_threshold
            for other in line
        )
    ]

    for index in range(1, len(line)):
        previous, current = line[index - 1], line[index]
        if current.x - previous.right > gap_threshold:
            # Random marks and the edge of the paper are recognised with low confidence
            if previous.confidence >= gap_min_confidence and current.confidence >= gap_min_confidence:
                del line[index:]
                break

    return line
