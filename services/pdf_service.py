"""
PDF Service - Reads the scanned images embedded in report PDFs.

Each page of a report is one or more raster images. The service yields every
image of a page together with the rectangle it occupies, expressed in the
pixel space of the image itself so that OCR coordinates from several images
on a page can be combined.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import fitz  # PyMuPDF
from PIL import Image

from core.exceptions import PdfDecodeError
from core.models import Rectangle
from utils.image_utils import pixmap_to_image

logger = logging.getLogger(__name__)


@dataclass
class PageImage:
    """An image painted on a PDF page and where it was painted."""
    image: Image.Image
    bounds: Rectangle


def placement_rectangle(
    transform: Sequence[float],
    image_width: int,
    image_height: int,
    viewport_height: float
) -> Optional[Rectangle]:
    """
    Compute where an image is placed, scaled to the image's own pixel size.

    Args:
        transform: PDF image matrix [a, b, c, d, e, f] (bottom-left origin)
        image_width: Image width in pixels
        image_height: Image height in pixels
        viewport_height: Height of the page in PDF units

    Returns:
        Placement rectangle, or None if the transform has no height
    """
    d, e, f = transform[3], transform[4], transform[5]
    if d == 0:
        return None
    return Rectangle(
        x=(e * image_height) / d,
        y=((viewport_height - f - d) * image_height) / d,
        width=image_width,
        height=image_height
    )


def image_matrix(bbox: fitz.Rect, viewport_height: float) -> List[float]:
    """Convert an image's bounding box on the page into a PDF image matrix."""
    return [bbox.width, 0.0, 0.0, bbox.height, bbox.x0, viewport_height - bbox.y1]


class PdfDocument:
    """A report PDF opened from memory."""

    def __init__(self, data: bytes, name: str = "document"):
        """
        Open a PDF.

        Args:
            data: PDF file content
            name: Name used in log messages

        Raises:
            PdfDecodeError: If the content is not a readable PDF
        """
        self.name = name
        try:
            self.doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise PdfDecodeError(f"Could not open {name}: {e}") from e

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.doc.close()

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def page_images(self, page_number: int) -> Iterator[PageImage]:
        """
        Yield the images painted on a page.

        Args:
            page_number: 1-indexed page number

        Yields:
            PageImage for each image with a usable placement
        """
        try:
            page = self.doc.load_page(page_number - 1)
            image_infos = page.get_image_info(xrefs=True)
        except (RuntimeError, ValueError) as e:
            raise PdfDecodeError(f"Could not read page {page_number} of {self.name}: {e}") from e

        viewport_height = page.rect.height

        for info in image_infos:
            bbox = fitz.Rect(info['bbox'])
            image = self._load_image(page, info, bbox)

            bounds = placement_rectangle(
                image_matrix(bbox, viewport_height),
                image.width,
                image.height,
                viewport_height
            )
            if bounds is None:
                logger.warning(
                    "Could not place the %dx%d image on page %d; any text in the image will be ignored",
                    image.width, image.height, page_number
                )
                continue

            yield PageImage(image=image, bounds=bounds)

    def _load_image(self, page: fitz.Page, info: dict, bbox: fitz.Rect) -> Image.Image:
        xref = info.get('xref', 0)
        try:
            if xref:
                return pixmap_to_image(fitz.Pixmap(self.doc, xref))

            # Inline images have no xref; render the area they cover at the
            # image's own resolution instead
            scale_x = info['width'] / bbox.width if bbox.width else 1.0
            scale_y = info['height'] / bbox.height if bbox.height else 1.0
            pixmap = page.get_pixmap(matrix=fitz.Matrix(scale_x, scale_y), clip=bbox, alpha=False)
            return pixmap_to_image(pixmap)
        except (RuntimeError, ValueError) as e:
            raise PdfDecodeError(f"Could not decode an image on page {page.number + 1} of {self.name}: {e}") from e
