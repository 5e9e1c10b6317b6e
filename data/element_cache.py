"""
Element cache.

Stores the OCR elements of each page as JSON so that a report can be parsed
again (for example after tuning the extraction) without repeating the slow
OCR step.
"""
import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from core.models import Element

logger = logging.getLogger(__name__)


def cache_key(document_name: str) -> str:
    """Turn a document name or URL into a safe file name prefix."""
    name = document_name.rstrip('/').split('/')[-1]
    if name.lower().endswith('.pdf'):
        name = name[:-4]
    return re.sub(r'[^A-Za-z0-9_-]+', '_', name) or "document"


class ElementCache:
    """Per-page element cache in a directory of JSON files."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, document_name: str, page_number: int) -> Path:
        return self.directory / f"{cache_key(document_name)}.page{page_number}.json"

    def load(self, document_name: str, page_number: int) -> Optional[List[Element]]:
        """
        Load the cached elements of a page.

        Returns:
            Elements, or None if the page has not been cached
        """
        path = self._path(document_name, page_number)
        if not path.exists():
            return None

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        elements = [Element.from_dict(item) for item in data.get('elements', [])]
        logger.debug("Loaded %d cached element(s) from %s", len(elements), path)
        return elements

    def save(self, document_name: str, page_number: int, elements: List[Element]) -> Path:
        """Save the elements of a page, replacing any earlier copy."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(document_name, page_number)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump({
                'document': document_name,
                'page': page_number,
                'elements': [element.to_dict() for element in elements]
            }, f, indent=2, ensure_ascii=False)

        logger.debug("Cached %d element(s) in %s", len(elements), path)
        return path
