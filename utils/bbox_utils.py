"""
Bounding box utilities for the application scraping workflow.

Rectangle arithmetic, row and neighbour lookups over OCR elements, and
visualisation of recognised elements.
"""
import math
from typing import Iterable, List, Optional

from PIL import Image, ImageDraw, ImageFont

from core.models import Element, Rectangle, EMPTY_RECTANGLE


# A candidate starting further left than this fraction of the reference
# element's width (measured back from its right edge) is not to its right.
RIGHT_OVERLAP_FACTOR = 0.2


def intersect(rectangle1: Rectangle, rectangle2: Rectangle) -> Rectangle:
    """
    Construct the intersection of two rectangles.

    Args:
        rectangle1: First rectangle
        rectangle2: Second rectangle

    Returns:
        The overlapping rectangle, or EMPTY_RECTANGLE if they do not overlap
    """
    x1 = max(rectangle1.x, rectangle2.x)
    y1 = max(rectangle1.y, rectangle2.y)
    x2 = min(rectangle1.right, rectangle2.right)
    y2 = min(rectangle1.bottom, rectangle2.bottom)
    if x2 >= x1 and y2 >= y1:
        return Rectangle(x=x1, y=y1, width=x2 - x1, height=y2 - y1)
    return EMPTY_RECTANGLE


def union(rectangle1: Rectangle, rectangle2: Rectangle) -> Rectangle:
    """Construct the smallest rectangle containing both rectangles."""
    x1 = min(rectangle1.x, rectangle2.x)
    y1 = min(rectangle1.y, rectangle2.y)
    x2 = max(rectangle1.right, rectangle2.right)
    y2 = max(rectangle1.bottom, rectangle2.bottom)
    return Rectangle(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def area(rectangle: Rectangle) -> float:
    return rectangle.width * rectangle.height


def is_vertical_overlap(rectangle1: Rectangle, rectangle2: Rectangle) -> bool:
    """Determine whether two rectangles share any vertical extent."""
    return rectangle2.y < rectangle1.bottom and rectangle2.bottom > rectangle1.y


def vertical_overlap_percentage(rectangle1: Rectangle, rectangle2: Rectangle) -> float:
    """
    Percentage of the second rectangle's height that overlaps the first.

    0 means no overlap and 100 means the second rectangle lies entirely
    within the vertical extent of the first. Note the asymmetry: the
    denominator is always the height of rectangle2.

    Args:
        rectangle1: Reference rectangle
        rectangle2: Rectangle whose height is used as the denominator

    Returns:
        Overlap percentage in the range 0..100
    """
    if rectangle2.height <= 0:
        return 0.0
    y1 = max(rectangle1.y, rectangle2.y)
    y2 = min(rectangle1.bottom, rectangle2.bottom)
    if y2 < y1:
        return 0.0
    return ((y2 - y1) * 100) / rectangle2.height


def distance_squared(element1: Rectangle, element2: Rectangle) -> float:
    """
    Squared distance from the right middle of element1 to the left middle of element2.

    Returns infinity when element2 does not start to the right of element1
    (allowing element2 to overlap the last 20% of element1).
    """
    point1_x = element1.right
    point1_y = element1.y + element1.height / 2
    point2_x = element2.x
    point2_y = element2.y + element2.height / 2
    if point2_x < point1_x - element1.width * RIGHT_OVERLAP_FACTOR:
        return math.inf
    return (point2_x - point1_x) ** 2 + (point2_y - point1_y) ** 2


def right_neighbor(elements: Iterable[Element], element: Element) -> Optional[Element]:
    """
    Find the element immediately to the right of the specified element.

    Args:
        elements: Candidate elements (may include the element itself)
        element: Reference element

    Returns:
        The closest element on the same row to the right, or None
    """
    closest = None
    closest_distance = math.inf
    for candidate in elements:
        if candidate is element or not is_vertical_overlap(element, candidate):
            continue
        distance = distance_squared(element, candidate)
        if distance < closest_distance:
            closest = candidate
            closest_distance = distance
    return closest


def row_top(elements: Iterable[Rectangle], start_element: Rectangle) -> float:
    """
    Topmost y of the elements on the same row as start_element.

    Elements overlapping start_element vertically are considered part of
    its row, which tolerates small vertical jitter between words.
    """
    top = start_element.y
    for element in elements:
        if is_vertical_overlap(start_element, element) and element.y < top:
            top = element.y
    return top


def raise_element(element: Element, factor: float) -> Element:
    """Return a copy of the element moved up by factor times its height."""
    return element.moved_to(element.y - factor * element.height)


def containment_ratio(inner: Rectangle, outer: Rectangle) -> float:
    """Fraction of the inner rectangle's area lying within the outer rectangle."""
    inner_area = area(inner)
    if inner_area <= 0:
        return 0.0
    return area(intersect(inner, outer)) / inner_area


def draw_elements(
    image: Image.Image,
    elements: List[Element],
    offset_x: float = 0,
    offset_y: float = 0
) -> Image.Image:
    """
    Draw the bounding box and text of each element onto a copy of an image.

    Args:
        image: PIL Image the elements were recognised in
        elements: Elements in page coordinates
        offset_x: Page x coordinate of the image's left edge
        offset_y: Page y coordinate of the image's top edge

    Returns:
        Annotated copy of the image
    """
    img_draw = image.convert('RGB')
    draw = ImageDraw.Draw(img_draw)

    try:
        font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 12)
    except OSError:
        font = ImageFont.load_default()

    for element in elements:
        x1 = element.x - offset_x
        y1 = element.y - offset_y
        x2 = x1 + element.width
        y2 = y1 + element.height

        # Low confidence words are drawn in red
        color = (0, 160, 0) if element.confidence >= 60 else (220, 0, 0)
        draw.rectangle([x1, y1, x2, y2], outline=color, width=1)
        draw.text((x1, max(0, y1 - 14)), element.text, font=font, fill=color)

    return img_draw
