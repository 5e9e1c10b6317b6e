"""
Exceptions raised by the scraping workflow.

Any of these aborts the run. Problems confined to a single application
(missing anchors, unrecognised addresses) are not exceptions; the affected
application is skipped and the reason is logged.
"""


class ScraperError(Exception):
    """Base class for errors that abort a scraping run."""


class GazetteerError(ScraperError):
    """A gazetteer file is missing or malformed."""


class PdfDecodeError(ScraperError):
    """A PDF document could not be opened or a page could not be read."""


class OcrError(ScraperError):
    """The OCR engine failed to recognise an image."""
