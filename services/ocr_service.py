"""
OCR Service - Recognises the words in scanned report images.

The service returns recognition results as nested blocks, paragraphs, lines
and words; flatten_recognition turns such a result into positioned Elements,
so any engine producing the same structure can be swapped in.
"""
import asyncio
import logging
from typing import Dict, List, Optional

import pytesseract
from PIL import Image
from pytesseract import Output

from core.exceptions import OcrError
from core.models import Element

logger = logging.getLogger(__name__)


# Tesseract reports one row per layout level; level 5 rows are words
WORD_LEVEL = 5


def flatten_recognition(result: Dict, offset_x: float = 0, offset_y: float = 0) -> List[Element]:
    """
    Simplify a recognition result into a flat list of elements.

    Args:
        result: Nested result as returned by OCRService.recognize
        offset_x: Page x coordinate of the recognised image's left edge
        offset_y: Page y coordinate of the recognised image's top edge

    Returns:
        One Element per recognised word, in page coordinates
    """
    elements = []
    for block in result.get('blocks') or []:
        for paragraph in block.get('paragraphs', []):
            for line in paragraph.get('lines', []):
                for word in line.get('words', []):
                    bbox = word['bbox']
                    elements.append(Element(
                        x=bbox['x0'] + offset_x,
                        y=bbox['y0'] + offset_y,
                        width=bbox['x1'] - bbox['x0'],
                        height=bbox['y1'] - bbox['y0'],
                        text=word['text'],
                        confidence=word['confidence'],
                        choice_count=len(word.get('choices', []))
                    ))
    return elements


class OCRService:
    """Service for word recognition using Tesseract."""

    def __init__(
        self,
        language: str = "eng",
        config: str = "",
        tesseract_cmd: Optional[str] = None
    ):
        """
        Initialize OCR service.

        Args:
            language: Tesseract language code (default: "eng")
            config: Extra Tesseract command line options
            tesseract_cmd: Path to the tesseract binary (optional)
        """
        self.language = language
        self.config = config
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    async def recognize(self, image: Image.Image) -> Dict:
        """
        Recognise the words in an image.

        The blocking Tesseract call runs in a worker thread; callers await
        one call at a time.

        Args:
            image: PIL Image to recognise

        Returns:
            Dict of blocks, each holding paragraphs, lines and words with
            text, confidence, choices and bbox (x0, y0, x1, y1)

        Raises:
            OcrError: If Tesseract is missing or fails
        """
        try:
            data = await asyncio.to_thread(
                pytesseract.image_to_data,
                image,
                lang=self.language,
                config=self.config,
                output_type=Output.DICT
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OcrError(f"Tesseract failed on a {image.width}x{image.height} image: {e}") from e

        return self._build_result(data)

    async def recognize_elements(
        self,
        image: Image.Image,
        offset_x: float = 0,
        offset_y: float = 0
    ) -> List[Element]:
        """Recognise an image and return its words as page elements."""
        result = await self.recognize(image)
        return flatten_recognition(result, offset_x, offset_y)

    def _build_result(self, data: Dict[str, list]) -> Dict:
        """Nest Tesseract's flat word rows by block, paragraph and line."""
        blocks: Dict[int, Dict[int, Dict[int, list]]] = {}

        for i in range(len(data.get('text', []))):
            if data['level'][i] != WORD_LEVEL:
                continue
            text = (data['text'][i] or "").strip()
            if not text:
                continue

            words = blocks.setdefault(data['block_num'][i], {}) \
                .setdefault(data['par_num'][i], {}) \
                .setdefault(data['line_num'][i], [])

            left, top = data['left'][i], data['top'][i]
            words.append({
                'text': text,
                'confidence': max(0.0, float(data['conf'][i])),
                'choices': [],
                'bbox': {
                    'x0': left,
                    'y0': top,
                    'x1': left + data['width'][i],
                    'y1': top + data['height'][i]
                }
            })

        return {
            'blocks': [
                {
                    'paragraphs': [
                        {'lines': [{'words': words} for words in lines.values()]}
                        for lines in paragraphs.values()
                    ]
                }
                for paragraphs in blocks.values()
            ]
        }
