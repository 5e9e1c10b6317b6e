"""Utilities package - Helper functions for image, bbox, text and fuzzy matching."""

from .image_utils import (
    pixmap_to_image,
    image_to_array,
    image_to_png_bytes,
    save_image
)

from .bbox_utils import (
    intersect,
    union,
    area,
    is_vertical_overlap,
    vertical_overlap_percentage,
    distance_squared,
    right_neighbor,
    row_top,
    raise_element,
    containment_ratio,
    draw_elements
)

from .text_utils import (
    condense_text,
    collapse_whitespace,
    expand_ligatures,
    join_element_text,
    clean_address_text,
    normalize_application_number,
    is_non_address,
    parse_received_date,
    format_date
)

from .fuzzy import closest_match, match_distance

__all__ = [
    # Image utils
    'pixmap_to_image',
    'image_to_array',
    'image_to_png_bytes',
    'save_image',

    # BBox utils
    'intersect',
    'union',
    'area',
    'is_vertical_overlap',
    'vertical_overlap_percentage',
    'distance_squared',
    'right_neighbor',
    'row_top',
    'raise_element',
    'containment_ratio',
    'draw_elements',

    # Text utils
    'condense_text',
    'collapse_whitespace',
    'expand_ligatures',
    'join_element_text',
    'clean_address_text',
    'normalize_application_number',
    'is_non_address',
    'parse_received_date',
    'format_date',

    # Fuzzy matching
    'closest_match',
    'match_distance'
]
