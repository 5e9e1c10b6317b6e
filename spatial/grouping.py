"""
Grouping Module

Groups the OCR elements of a page into one group per development application:
- Label detection: find every "Dev App No." row label, even when OCR splits
  it over several words or misreads characters
- Row grouping: collect the elements between one label row and the next
"""
import logging
import math
from typing import List, Optional

from core.constants import LABEL_MAX_DISTANCE, LABEL_NUMBER_VARIANTS, RECORD_COUNT_LABELS
from core.models import ApplicationElementGroup, Element
from utils.bbox_utils import raise_element, right_neighbor, row_top, vertical_overlap_percentage
from utils.fuzzy import closest_match, match_distance
from utils.text_utils import condense_text

logger = logging.getLogger(__name__)


def sort_elements(elements: List[Element]) -> List[Element]:
    """Sort elements by Y co-ordinate and then by X co-ordinate."""
    return sorted(elements, key=lambda e: (e.y, e.x))


def label_spellings(label_text: str) -> List[str]:
    """
    Get the accepted condensed spellings of a row label.

    A label ending in "No" also accepts the common OCR misreadings of
    "No" (for example "N0" and "N°").

    Args:
        label_text: Label as printed, e.g. "Dev App No."

    Returns:
        Condensed spellings, the exact spelling first
    """
    condensed = condense_text(label_text)
    spellings = [condensed]
    if condensed.endswith('no'):
        spellings.extend(condensed[:-2] + variant for variant in LABEL_NUMBER_VARIANTS)
    return spellings


def match_label(
    elements: List[Element],
    element: Element,
    spellings: List[str],
    max_tokens: int = 3,
    max_distance: int = LABEL_MAX_DISTANCE
) -> Optional[Element]:
    """
    Check whether a label starts at the specified element.

    The label may be spread across up to max_tokens elements, so the
    element is extended with its right neighbours one at a time and the
    concatenated text is compared with the accepted spellings. The span
    closest to a spelling wins; ties go to the shorter span.

    Args:
        elements: All elements on the page
        element: Element holding the first word of the label
        spellings: Accepted condensed spellings (see label_spellings)
        max_tokens: Maximum number of elements the label may be split over
        max_distance: Maximum edit distance for a match

    Returns:
        The last element of the label, or None if the label does not start here
    """
    best_element = None
    best_distance = math.inf

    span_end = element
    text = condense_text(element.text)

    for token_count in range(1, max_tokens + 1):
        if token_count > 1:
            span_end = right_neighbor(elements, span_end)
            if span_end is None:
                break
            text += condense_text(span_end.text)

        distance = match_distance(text, spellings, case_sensitive=True)
        if distance is not None and distance <= max_distance and distance < best_distance:
            best_element = span_end
            best_distance = distance
            if distance == 0:
                break

    return best_element


def find_label_elements(
    elements: List[Element],
    label_text: str,
    max_tokens: int = 3,
    max_distance: int = LABEL_MAX_DISTANCE
) -> List[Element]:
    """
    Find every occurrence of the row label on a page.

    Args:
        elements: All elements on the page
        label_text: Label as printed, e.g. "Dev App No."
        max_tokens: Maximum number of elements the label may be split over
        max_distance: Maximum edit distance for a match

    Returns:
        The last element of each label occurrence, sorted by Y co-ordinate
    """
    spellings = label_spellings(label_text)
    first_word = condense_text(label_text.split()[0])

    start_elements = []
    for element in sort_elements(elements):
        if not condense_text(element.text).startswith(first_word):
            continue
        label_element = match_label(elements, element, spellings, max_tokens, max_distance)
        if label_element is not None and not any(label_element is e for e in start_elements):
            start_elements.append(label_element)

    return sorted(start_elements, key=lambda e: e.y)


def group_applications(
    elements: List[Element],
    start_elements: List[Element],
    raise_factor: float = 2.0
) -> List[ApplicationElementGroup]:
    """
    Group the elements of a page into sections, one per label occurrence.

    Each section starts at the row of its label (raised by raise_factor
    label heights, because the lodged date can sit higher than the label)
    and ends where the next label's row starts.

    Args:
        elements: All elements on the page
        start_elements: Label elements sorted by Y co-ordinate
        raise_factor: Label heights to extend each section upwards by

    Returns:
        One ApplicationElementGroup per label element
    """
    groups = []

    for index, start_element in enumerate(start_elements):
        top = row_top(elements, raise_element(start_element, raise_factor))
        if index + 1 < len(start_elements):
            next_top = row_top(elements, start_elements[index + 1])
        else:
            next_top = math.inf

        groups.append(ApplicationElementGroup(
            start_element=start_element,
            elements=[e for e in elements if e.y >= top and e.bottom < next_top]
        ))

    return groups


def find_record_count(elements: List[Element], first_start_element: Optional[Element]) -> Optional[int]:
    """
    Read the record count printed above the first application on a report.

    Args:
        elements: All elements on the first page
        first_start_element: First label element on the page (if any)

    Returns:
        The expected number of applications, or None if not found
    """
    topmost_y = math.inf if first_start_element is None else first_start_element.y

    records_element = next(
        (
            e for e in elements
            if e.y < topmost_y and closest_match(e.text, RECORD_COUNT_LABELS, LABEL_MAX_DISTANCE) is not None
        ),
        None
    )
    if records_element is None:
        return None

    count_element = next(
        (
            e for e in elements
            if e.x > records_element.right and vertical_overlap_percentage(e, records_element) > 50
        ),
        None
    )
    if count_element is None:
        return None

    try:
        return int(count_element.text.strip())
    except ValueError:
        return None
