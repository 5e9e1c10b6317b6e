"""
Image Segmentation Module

Splits large scanned report images into smaller images along bands of
white (or nearly white) pixels so that each OCR call only sees a bounded
amount of the page:
- Vertical split: runs of white horizontal lines
- Horizontal split: runs of white vertical lines within each vertical part
"""
import logging
from typing import List, Tuple

import numpy as np
from PIL import Image

from core.models import ImageSegment, Rectangle
from utils.image_utils import image_to_array

logger = logging.getLogger(__name__)


def find_white_bands(
    white_lines: np.ndarray,
    offset: int,
    min_white_band: int
) -> List[Tuple[int, int]]:
    """
    Find runs of consecutive white lines.

    Args:
        white_lines: Boolean array, True for each white scan line
        offset: Coordinate of the first scan line
        min_white_band: Shortest run worth splitting on

    Returns:
        List of (start, length) tuples in image coordinates
    """
    bands = []
    band_start = None

    for index, is_white in enumerate(white_lines):
        if is_white and band_start is None:
            band_start = index
        elif not is_white and band_start is not None:
            bands.append((offset + band_start, index - band_start))
            band_start = None

    if band_start is not None:
        bands.append((offset + band_start, len(white_lines) - band_start))

    return [band for band in bands if band[1] >= min_white_band]


def split_span(start: int, length: int, bands: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Get the spans that remain when the white bands are removed.

    Args:
        start: Start coordinate of the span being split
        length: Length of the span being split
        bands: White bands (start, length) within the span, in order

    Returns:
        List of (start, length) tuples
    """
    spans = []
    previous_end = start

    for band_start, band_length in bands:
        if band_start > previous_end:
            spans.append((previous_end, band_start - previous_end))
        previous_end = band_start + band_length

    end = start + length
    if end > previous_end:
        spans.append((previous_end, end - previous_end))

    return spans


def _white_pixel_mask(pixels: np.ndarray, white_threshold: int) -> np.ndarray:
    # White or just off-white: every channel above the threshold
    return (pixels > white_threshold).all(axis=2)


def segment_vertically(
    white_mask: np.ndarray,
    bounds: Rectangle,
    max_dark_pixels: int,
    min_white_band: int
) -> List[Rectangle]:
    """Split bounds into rectangles separated by bands of white rows."""
    x, y = int(bounds.x), int(bounds.y)
    width, height = int(bounds.width), int(bounds.height)
    region = white_mask[y:y + height, x:x + width]

    dark_counts = width - region.sum(axis=1)
    white_rows = dark_counts <= max_dark_pixels

    bands = find_white_bands(white_rows, y, min_white_band)
    return [
        Rectangle(x=x, y=span_y, width=width, height=span_height)
        for span_y, span_height in split_span(y, height, bands)
    ]


def segment_horizontally(
    white_mask: np.ndarray,
    bounds: Rectangle,
    max_dark_pixels: int,
    min_white_band: int
) -> List[Rectangle]:
    """Split bounds into rectangles separated by bands of white columns."""
    x, y = int(bounds.x), int(bounds.y)
    width, height = int(bounds.width), int(bounds.height)
    region = white_mask[y:y + height, x:x + width]

    dark_counts = height - region.sum(axis=0)
    white_columns = dark_counts <= max_dark_pixels

    bands = find_white_bands(white_columns, x, min_white_band)
    return [
        Rectangle(x=span_x, y=y, width=span_width, height=height)
        for span_x, span_width in split_span(x, width, bands)
    ]


def segment_image(
    image: Image.Image,
    min_area: int = 500 * 500,
    white_threshold: int = 240,
    max_dark_pixels: int = 2,
    min_white_band: int = 25
) -> List[ImageSegment]:
    """
    Segment an image based on blocks of white pixels.

    Very often a large scanned image is mostly white space. Small images are
    returned unchanged as a single segment. Always returns at least one
    segment.

    Args:
        image: PIL Image to segment
        min_area: Images with this many pixels or fewer are not segmented
        white_threshold: Channel value above which a pixel counts as white
        max_dark_pixels: Non-white pixels tolerated in a white scan line
        min_white_band: Minimum number of consecutive white lines to split on

    Returns:
        List of ImageSegment with bounds relative to the input image
    """
    width, height = image.size
    full_bounds = Rectangle(x=0, y=0, width=width, height=height)

    if width * height <= min_area:
        return [ImageSegment(image=image, bounds=full_bounds)]

    white_mask = _white_pixel_mask(image_to_array(image), white_threshold)

    rectangles = []
    for vertical_rectangle in segment_vertically(white_mask, full_bounds, max_dark_pixels, min_white_band):
        rectangles.extend(
            segment_horizontally(white_mask, vertical_rectangle, max_dark_pixels, min_white_band)
        )
    del white_mask

    if not rectangles:
        return [ImageSegment(image=image, bounds=full_bounds)]

    logger.debug("Segmented %dx%d image into %d segment(s)", width, height, len(rectangles))

    return [
        ImageSegment(
            image=image.crop((r.x, r.y, r.x + r.width, r.y + r.height)),
            bounds=r
        )
        for r in rectangles
    ]
