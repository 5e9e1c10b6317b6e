"""
Unit tests for services.pipeline module.
"""
import asyncio
import logging

import fitz
import pytest
from PIL import Image

from data.element_cache import ElementCache
from services.pipeline import ApplicationPipeline
from utils.image_utils import image_to_png_bytes

URL = "http://www.murraybridge.sa.gov.au/webdata/resources/files/DA_Register_July.pdf"


class FakeOCRService:
    """Returns the same elements for every image."""

    def __init__(self, elements):
        self.elements = elements
        self.calls = []

    async def recognize_elements(self, image, offset_x=0, offset_y=0):
        self.calls.append((image.size, offset_x, offset_y))
        return list(self.elements)


class FailingOCRService:
    async def recognize_elements(self, image, offset_x=0, offset_y=0):
        raise AssertionError("OCR should not run")


@pytest.fixture
def pdf_data():
    """One page report holding a single scanned image."""
    doc = fitz.open()
    page = doc.new_page(width=200, height=100)
    page.insert_image(fitz.Rect(0, 0, 200, 100), stream=image_to_png_bytes(Image.new('RGB', (400, 200), 'white')))
    data = doc.tobytes()
    doc.close()
    return data


def _pipeline(gazetteer, ocr_service, **kwargs):
    return ApplicationPipeline(
        gazetteer=gazetteer,
        ocr_service=ocr_service,
        comment_url="mailto:council@murraybridge.sa.gov.au",
        scrape_date="2017-08-01",
        **kwargs
    )


class TestProcessPdf:
    """Tests for ApplicationPipeline.process_pdf."""

    def test_single_application(self, pdf_data, application_elements, gazetteer):
        ocr = FakeOCRService(application_elements)

        applications = asyncio.run(_pipeline(gazetteer, ocr).process_pdf(pdf_data, URL))

        assert ocr.calls == [((400, 200), pytest.approx(0), pytest.approx(0))]
        assert len(applications) == 1
        assert applications[0].application_number == "17/2017"
        assert applications[0].information_url == URL
        assert applications[0].scrape_date == "2017-08-01"

    def test_several_applications(self, pdf_data, layout_builder, gazetteer):
        elements = layout_builder(top=100) + \
            layout_builder(top=400, address_words=['Bremer', 'Range', 'RD', 'CALLINGTON'])

        applications = asyncio.run(_pipeline(gazetteer, FakeOCRService(elements)).process_pdf(pdf_data, URL))

        assert [a.address for a in applications] == ["12 Smith Road, SA 5254", "Bremer Range Road, SA 5254"]

    def test_page_without_labels(self, pdf_data, make_element, gazetteer, caplog):
        ocr = FakeOCRService([make_element('Nothing', 10, 10)])

        with caplog.at_level(logging.WARNING):
            applications = asyncio.run(_pipeline(gazetteer, ocr).process_pdf(pdf_data, URL))

        assert applications == []
        assert "No 'Dev App No.' labels found" in caplog.text

    def test_record_count_mismatch(self, pdf_data, make_element, application_elements, gazetteer, caplog):
        elements = application_elements + [
            make_element('Records', 10, 40, width=70),
            make_element('2', 100, 40, width=10),
        ]

        with caplog.at_level(logging.WARNING):
            applications = asyncio.run(_pipeline(gazetteer, FakeOCRService(elements)).process_pdf(pdf_data, URL))

        assert len(applications) == 1
        assert "expected=2 parsed=1" in caplog.text

    def test_element_cache(self, pdf_data, application_elements, gazetteer, temp_dir):
        cache = ElementCache(str(temp_dir / "cache"))
        asyncio.run(_pipeline(gazetteer, FakeOCRService(application_elements), element_cache=cache)
                    .process_pdf(pdf_data, URL))

        applications = asyncio.run(_pipeline(gazetteer, FailingOCRService(), element_cache=cache)
                                   .process_pdf(pdf_data, URL))

        assert [a.application_number for a in applications] == ["17/2017"]

    def test_annotated_images(self, pdf_data, application_elements, gazetteer, temp_dir):
        annotate_dir = temp_dir / "annotated"
        asyncio.run(_pipeline(gazetteer, FakeOCRService(application_elements), annotate_dir=str(annotate_dir))
                    .process_pdf(pdf_data, URL))

        assert [p.name for p in annotate_dir.iterdir()] == ["DA_Register_July.page1.image1.segment1.png"]
