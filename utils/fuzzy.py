"""
Fuzzy matching of OCR'd text against known spellings.
"""
from typing import Iterable, Optional

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein


def _normalize(text: str) -> str:
    return text.strip().lower()


def closest_match(
    candidate: Optional[str],
    dictionary: Iterable[str],
    max_distance: int,
    case_sensitive: bool = False
) -> Optional[str]:
    """
    Find the dictionary entry closest to the candidate by edit distance.

    Surrounding whitespace is ignored. When several entries share the
    smallest distance the first one in dictionary order wins.

    Args:
        candidate: Text to look up
        dictionary: Known spellings
        max_distance: Largest Levenshtein distance accepted as a match
        case_sensitive: Whether letter case counts towards the distance

    Returns:
        The matching dictionary entry, or None if nothing is close enough
    """
    if candidate is None:
        return None

    result = process.extractOne(
        candidate,
        list(dictionary),
        scorer=Levenshtein.distance,
        processor=str.strip if case_sensitive else _normalize,
        score_cutoff=max_distance
    )
    return None if result is None else result[0]


def match_distance(
    candidate: str,
    dictionary: Iterable[str],
    case_sensitive: bool = False
) -> Optional[int]:
    """
    Smallest edit distance between the candidate and any dictionary entry.

    Returns:
        The distance, or None for an empty dictionary
    """
    processor = str.strip if case_sensitive else _normalize
    distances = [
        Levenshtein.distance(processor(candidate), processor(entry))
        for entry in dictionary
    ]
    return min(distances) if distances else None
