"""
Unit tests for the scrape_applications command line runner.
"""
import logging

import fitz
import pytest
from PIL import Image

import scrape_applications
from data.database import DatabaseManager
from data.repositories import DevelopmentApplicationRepository
from utils.image_utils import image_to_png_bytes


@pytest.fixture
def report_pdf(temp_dir):
    doc = fitz.open()
    page = doc.new_page(width=200, height=100)
    page.insert_image(fitz.Rect(0, 0, 200, 100), stream=image_to_png_bytes(Image.new('RGB', (400, 200), 'white')))
    path = temp_dir / "DA_Register_July.pdf"
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def fake_ocr(monkeypatch, application_elements):
    """Replace Tesseract with a recogniser returning one application."""
    class FakeOCRService:
        def __init__(self, **kwargs):
            pass

        async def recognize_elements(self, image, offset_x=0, offset_y=0):
            return list(application_elements)

    monkeypatch.setattr(scrape_applications, 'OCRService', FakeOCRService)


class TestParseArgs:
    """Tests for parse_args function."""

    def test_defaults(self):
        args = scrape_applications.parse_args([])
        assert args.pdf_url == []
        assert args.pdf_file == []
        assert not args.dry_run
        assert args.log_level == 'INFO'

    def test_repeatable(self):
        args = scrape_applications.parse_args(['--pdf-url', 'a.pdf', '--pdf-url', 'b.pdf', '--dry-run'])
        assert args.pdf_url == ['a.pdf', 'b.pdf']
        assert args.dry_run


class TestMain:
    """Tests for a full run over a local report."""

    def test_run_is_idempotent(self, report_pdf, gazetteer_dir, temp_dir, fake_ocr, caplog):
        caplog.set_level(logging.INFO)
        database_url = f"sqlite:///{temp_dir / 'data.sqlite'}"
        argv = ['--pdf-file', str(report_pdf), '--gazetteer-dir', str(gazetteer_dir),
                '--database-url', database_url]

        assert scrape_applications.main(argv) == 0
        assert scrape_applications.main(argv) == 0
        assert "Applications stored: 1" in caplog.text

        with DatabaseManager(database_url).session() as session:
            repository = DevelopmentApplicationRepository(session)
            assert repository.count() == 1
            record = repository.get_by_reference("17/2017")
            assert record.address == "12 Smith Road, SA 5254"
            assert record.info_url == report_pdf.resolve().as_uri()

    def test_dry_run(self, report_pdf, gazetteer_dir, fake_ocr, capsys):
        argv = ['--pdf-file', str(report_pdf), '--gazetteer-dir', str(gazetteer_dir), '--dry-run']

        assert scrape_applications.main(argv) == 0
        assert "17/2017" in capsys.readouterr().out

    def test_missing_gazetteer_fails(self, report_pdf, temp_dir, fake_ocr):
        argv = ['--pdf-file', str(report_pdf), '--gazetteer-dir', str(temp_dir / 'missing'), '--dry-run']
        assert scrape_applications.main(argv) == 1

    def test_unreadable_pdf_fails(self, gazetteer_dir, temp_dir, fake_ocr):
        broken = temp_dir / "broken.pdf"
        broken.write_bytes(b"not a pdf")
        argv = ['--pdf-file', str(broken), '--gazetteer-dir', str(gazetteer_dir), '--dry-run']
        assert scrape_applications.main(argv) == 1
