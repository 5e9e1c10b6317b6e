"""
Gazetteer loading.

Reads the street name, street suffix and suburb reference files used to
correct OCR'd addresses. Each file holds one comma separated record per line.
"""
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from core.constants import STREET_NAMES_FILE, STREET_SUFFIXES_FILE, SUBURB_NAMES_FILE
from core.exceptions import GazetteerError
from core.models import Gazetteer

logger = logging.getLogger(__name__)


def read_pairs(path: Path) -> List[Tuple[str, str]]:
    """
    Read a two column comma separated reference file.

    Only the first comma separates the columns, so the second column may
    itself contain commas. Double quotes around the second column are
    removed.

    Args:
        path: File to read

    Returns:
        List of (first, second) tuples with surrounding whitespace removed

    Raises:
        GazetteerError: If the file is missing or a line has one column
    """
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise GazetteerError(f"Could not read gazetteer file {path}: {e}") from e

    pairs = []
    for line_number, line in enumerate(content.replace('\r', '').split('\n'), start=1):
        if not line.strip():
            continue
        tokens = line.split(',', 1)
        if len(tokens) < 2:
            raise GazetteerError(f"{path}:{line_number}: expected two comma separated values, got {line!r}")
        pairs.append((tokens[0].strip(), tokens[1].strip().strip('"')))
    return pairs


def load_gazetteer(directory: str) -> Gazetteer:
    """
    Load all street, street suffix, suburb, state and post code information.

    Args:
        directory: Directory containing the three gazetteer files

    Returns:
        Read-only Gazetteer
    """
    base = Path(directory)

    street_names: Dict[str, List[str]] = {}
    for street_name, suburb_name in read_pairs(base / STREET_NAMES_FILE):
        # Several suburbs may exist for the same street name
        street_names.setdefault(street_name, []).append(suburb_name)

    street_suffixes = {
        abbreviation.lower(): suffix
        for abbreviation, suffix in read_pairs(base / STREET_SUFFIXES_FILE)
    }

    suburb_names = {
        suburb_name.lower(): state_and_post_code
        for suburb_name, state_and_post_code in read_pairs(base / SUBURB_NAMES_FILE)
    }

    logger.info(
        "Loaded gazetteer: streets=%d suffixes=%d suburbs=%d",
        len(street_names), len(street_suffixes), len(suburb_names)
    )
    return Gazetteer.from_dicts(street_names, street_suffixes, suburb_names)
