"""Spatial analysis package - Segmentation, row grouping and field extraction from word positions."""

from .segmentation import (
    find_white_bands,
    split_span,
    segment_vertically,
    segment_horizontally,
    segment_image,
)

from .grouping import (
    sort_elements,
    label_spellings,
    match_label,
    find_label_elements,
    group_applications,
    find_record_count,
)

from .extraction import (
    sort_into_lines,
    find_middle_element,
    extract_application_number,
    extract_received_date,
    extract_description,
    find_assessment_number_element,
    find_line_above,
)

__all__ = [
    # Segmentation
    'find_white_bands',
    'split_span',
    'segment_vertically',
    'segment_horizontally',
    'segment_image',

    # Grouping
    'sort_elements',
    'label_spellings',
    'match_label',
    'find_label_elements',
    'group_applications',
    'find_record_count',

    # Field extraction
    'sort_into_lines',
    'find_middle_element',
    'extract_application_number',
    'extract_received_date',
    'extract_description',
    'find_assessment_number_element',
    'find_line_above',
]
