"""
Scraper Service - Finds and downloads the council's development application reports.
"""
import asyncio
import logging
import random
from typing import List, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from core.constants import PDF_LINK_SELECTOR

logger = logging.getLogger(__name__)


def parse_pdf_urls(html: str, page_url: str) -> List[str]:
    """
    Get the report links from the listing page.

    Links are resolved against the page URL, forced to use HTTP and
    de-duplicated, keeping the order of the page (most recent first).

    Args:
        html: Listing page HTML
        page_url: URL the page was retrieved from

    Returns:
        List of absolute PDF URLs
    """
    soup = BeautifulSoup(html, "html.parser")
    pdf_urls = []
    for link in soup.select(PDF_LINK_SELECTOR):
        pdf_url = urlparse(urljoin(page_url, link.get('href', '')))._replace(scheme='http').geturl()
        if pdf_url not in pdf_urls:
            pdf_urls.append(pdf_url)
    return pdf_urls


def select_pdf_urls(pdf_urls: List[str], rng: Optional[random.Random] = None) -> List[str]:
    """
    Select the most recent report and one other randomly chosen report.

    Processing every report at once would use too much memory, so each run
    handles two; over several runs all reports are visited.

    Args:
        pdf_urls: Report URLs, most recent first
        rng: Random number generator (default: the random module)

    Returns:
        Up to two URLs in random order
    """
    rng = rng or random
    if not pdf_urls:
        return []

    selected = [pdf_urls[0]]
    if len(pdf_urls) > 1:
        selected.append(rng.choice(pdf_urls[1:]))
    if rng.randrange(2) == 0:
        selected.reverse()
    return selected


class ScraperService:
    """Service for retrieving the listing page and report PDFs."""

    def __init__(
        self,
        listing_url: str,
        proxy: Optional[str] = None,
        timeout: float = 120.0,
        delay_min: float = 2.0,
        delay_max: float = 7.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize scraper service.

        Args:
            listing_url: Page linking to the report PDFs
            proxy: HTTP proxy URL (optional)
            timeout: Request timeout in seconds
            delay_min: Minimum pause after each request in seconds
            delay_max: Maximum pause after each request in seconds
            client: HTTP client to use instead of creating one (optional)
        """
        self.listing_url = listing_url
        self.delay_min = delay_min
        self.delay_max = delay_max

        self.client = client if client is not None else httpx.AsyncClient(
            proxy=proxy,
            timeout=httpx.Timeout(timeout),
            follow_redirects=True
        )

    async def __aenter__(self) -> "ScraperService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def fetch_pdf_urls(self) -> List[str]:
        """Retrieve the listing page and return its report links."""
        logger.info("Retrieving page: %s", self.listing_url)
        response = await self.client.get(self.listing_url)
        response.raise_for_status()
        await self._pause()

        pdf_urls = parse_pdf_urls(response.text, self.listing_url)
        logger.info("Found %d report(s) on the listing page", len(pdf_urls))
        return pdf_urls

    async def fetch_pdf(self, url: str) -> bytes:
        """
        Download a report PDF.

        Raises:
            httpx.HTTPStatusError: If the server returns an error
        """
        logger.info("Retrieving document: %s", url)
        response = await self.client.get(url)
        response.raise_for_status()
        await self._pause()
        return response.content

    async def _pause(self) -> None:
        # Be polite to the council web server
        await asyncio.sleep(random.uniform(self.delay_min, self.delay_max))
