"""
Application Pipeline - Runs one report PDF through OCR and field extraction.

For each page: images → segments → OCR → elements → row groups →
development applications. Work is strictly sequential and large images are
released after use, since a report can hold dozens of full page scans.
"""
import gc
import logging
from typing import List, Optional, Tuple

from core.models import DevelopmentApplication, Element, Gazetteer
from data.element_cache import ElementCache, cache_key
from services.application_parser import parse_application_group
from services.ocr_service import OCRService
from services.pdf_service import PdfDocument
from spatial.grouping import find_label_elements, find_record_count, group_applications, sort_elements
from spatial.segmentation import segment_image
from utils.bbox_utils import draw_elements
from utils.image_utils import save_image

logger = logging.getLogger(__name__)


class ApplicationPipeline:
    """Parses the development applications out of report PDFs."""

    def __init__(
        self,
        gazetteer: Gazetteer,
        ocr_service: OCRService,
        comment_url: str,
        label_text: str = "Dev App No.",
        label_max_tokens: int = 3,
        label_raise_factor: float = 2.0,
        segmentation_params: Optional[dict] = None,
        address_params: Optional[dict] = None,
        element_cache: Optional[ElementCache] = None,
        annotate_dir: Optional[str] = None,
        scrape_date: Optional[str] = None
    ):
        """
        Initialize the pipeline.

        Args:
            gazetteer: Reference tables for address correction
            ocr_service: Recogniser turning images into words
            comment_url: Where the public can comment on applications
            label_text: Row label starting each application
            label_max_tokens: Maximum number of words the label may be split over
            label_raise_factor: Label heights each application row is extended upwards by
            segmentation_params: Keyword arguments for segment_image
            address_params: Keyword arguments for the address line search
            element_cache: Cache of OCR elements per page (optional)
            annotate_dir: Directory to write annotated OCR images to (optional)
            scrape_date: Date of the scrape as YYYY-MM-DD (default: today)
        """
        self.gazetteer = gazetteer
        self.ocr_service = ocr_service
        self.comment_url = comment_url
        self.label_text = label_text
        self.label_max_tokens = label_max_tokens
        self.label_raise_factor = label_raise_factor
        self.segmentation_params = segmentation_params or {}
        self.address_params = address_params or {}
        self.element_cache = element_cache
        self.annotate_dir = annotate_dir
        self.scrape_date = scrape_date

    async def process_pdf(self, data: bytes, url: str) -> List[DevelopmentApplication]:
        """
        Parse a PDF to find all development applications.

        Args:
            data: PDF file content
            url: Where the PDF came from (stored as the information URL)

        Returns:
            Development applications in page order

        Raises:
            PdfDecodeError: If the PDF cannot be read
            OcrError: If recognition fails
        """
        applications = []
        expected_count = None

        with PdfDocument(data, name=url) as document:
            logger.info("Parsing %s: pages=%d", url, document.page_count)

            for page_number in range(1, document.page_count + 1):
                logger.info("Reading and parsing page %d of %d", page_number, document.page_count)

                elements = await self.recognize_page(document, page_number, url)
                page_applications, record_count = self.parse_page(elements, url, first_page=page_number == 1)
                if record_count is not None:
                    expected_count = record_count
                applications.extend(page_applications)

                del elements
                gc.collect()

        if expected_count is not None and expected_count != len(applications):
            logger.warning(
                "Application count mismatch: url=%s expected=%d parsed=%d",
                url, expected_count, len(applications)
            )

        logger.info("Parsed %s: applications=%d", url, len(applications))
        return applications

    async def recognize_page(self, document: PdfDocument, page_number: int, document_name: str) -> List[Element]:
        """
        Get the OCR elements of a page, from the cache when available.

        Each image on the page is split into segments and each segment is
        recognised on its own; element coordinates are shifted back into
        page space.
        """
        if self.element_cache is not None:
            cached = self.element_cache.load(document_name, page_number)
            if cached is not None:
                logger.info("Using %d cached element(s) for page %d", len(cached), page_number)
                return cached

        elements: List[Element] = []

        for image_index, page_image in enumerate(document.page_images(page_number), start=1):
            segments = segment_image(page_image.image, **self.segmentation_params)
            logger.debug(
                "Page %d image %d: size=%dx%d segments=%d",
                page_number, image_index, page_image.image.width, page_image.image.height, len(segments)
            )

            for segment_index, segment in enumerate(segments, start=1):
                offset_x = page_image.bounds.x + segment.bounds.x
                offset_y = page_image.bounds.y + segment.bounds.y
                segment_elements = await self.ocr_service.recognize_elements(segment.image, offset_x, offset_y)
                elements.extend(segment_elements)

                if self.annotate_dir:
                    save_image(
                        draw_elements(segment.image, segment_elements, offset_x, offset_y),
                        self.annotate_dir,
                        f"{cache_key(document_name)}.page{page_number}.image{image_index}.segment{segment_index}.png"
                    )

                # Release the segment image before the next recognition
                segment.image = None
                gc.collect()

            del segments
            page_image.image = None

        if self.element_cache is not None:
            self.element_cache.save(document_name, page_number, elements)

        return elements

    def parse_page(
        self,
        elements: List[Element],
        url: str,
        first_page: bool = False
    ) -> Tuple[List[DevelopmentApplication], Optional[int]]:
        """
        Parse the development applications on one page.

        Args:
            elements: OCR elements of the page
            url: Information URL for the parsed applications
            first_page: Whether to also read the record count printed on the page

        Returns:
            Tuple of (applications, record count or None)
        """
        elements = sort_elements(elements)

        start_elements = find_label_elements(
            elements, self.label_text, max_tokens=self.label_max_tokens
        )

        record_count = None
        if first_page:
            record_count = find_record_count(elements, start_elements[0] if start_elements else None)
            if record_count is not None:
                logger.info("Document states record_count=%d", record_count)

        if not start_elements:
            logger.warning("No %r labels found on page: url=%s; ignoring page", self.label_text, url)
            return [], record_count

        groups = group_applications(elements, start_elements, self.label_raise_factor)
        logger.debug("Found application groups=%d", len(groups))

        applications = []
        for group in groups:
            application = parse_application_group(
                group,
                self.gazetteer,
                information_url=url,
                comment_url=self.comment_url,
                address_params=self.address_params,
                scrape_date=self.scrape_date
            )
            if application is not None:
                applications.append(application)

        return applications, record_count
