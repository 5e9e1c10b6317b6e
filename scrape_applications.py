#!/usr/bin/env python3
"""
CLI runner for the development application scraper.

Retrieves the council's development application reports, reads them with
OCR and stores every application that has not been stored before.
"""
import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

import httpx

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from core.exceptions import ScraperError
from core.models import DevelopmentApplication
from data.database import DatabaseManager
from data.element_cache import ElementCache
from data.gazetteer import load_gazetteer
from data.repositories import DevelopmentApplicationRepository
from services.ocr_service import OCRService
from services.pipeline import ApplicationPipeline
from services.scraper_service import ScraperService, select_pdf_urls

logger = logging.getLogger("scrape_applications")


def build_pipeline(args: argparse.Namespace) -> ApplicationPipeline:
    """Create the pipeline from settings and command line overrides."""
    gazetteer = load_gazetteer(args.gazetteer_dir or settings.gazetteer_dir)

    ocr_service = OCRService(
        language=settings.ocr_language,
        config=settings.ocr_config,
        tesseract_cmd=settings.tesseract_cmd
    )

    cache_dir = args.cache_dir or settings.cache_dir
    return ApplicationPipeline(
        gazetteer=gazetteer,
        ocr_service=ocr_service,
        comment_url=settings.comment_url,
        label_text=settings.label_text,
        label_max_tokens=settings.label_max_tokens,
        label_raise_factor=settings.label_raise_factor,
        segmentation_params=settings.get_segmentation_params(),
        address_params=settings.get_address_params(),
        element_cache=ElementCache(cache_dir) if cache_dir else None,
        annotate_dir=args.annotate_dir or settings.annotate_dir,
        scrape_date=date.today().isoformat()
    )


def store_applications(
    db_manager: DatabaseManager,
    applications: List[DevelopmentApplication]
) -> Tuple[int, int]:
    """
    Store applications, each in its own transaction.

    Returns:
        Tuple of (inserted, skipped) counts
    """
    inserted = skipped = 0
    for application in applications:
        with db_manager.session() as session:
            result = DevelopmentApplicationRepository(session).upsert(application)
        if result.inserted:
            inserted += 1
        else:
            skipped += 1
    return inserted, skipped


async def scrape(args: argparse.Namespace) -> int:
    """Run the scraper; returns the process exit status."""
    db_manager: Optional[DatabaseManager] = None
    if not args.dry_run:
        db_manager = DatabaseManager(args.database_url or settings.database_url)
        db_manager.create_tables()

    total_parsed = total_inserted = total_skipped = 0

    try:
        pipeline = build_pipeline(args)

        sources: List[Tuple[str, Optional[bytes]]] = [
            (Path(pdf_file).resolve().as_uri(), Path(pdf_file).read_bytes())
            for pdf_file in args.pdf_file
        ]

        async with ScraperService(
            settings.listing_url,
            proxy=settings.morph_proxy,
            timeout=settings.request_timeout,
            delay_min=settings.request_delay_min,
            delay_max=settings.request_delay_max
        ) as scraper:
            if args.pdf_url:
                pdf_urls = list(args.pdf_url)
            elif not args.pdf_file:
                pdf_urls = await scraper.fetch_pdf_urls()
                if not pdf_urls:
                    logger.warning("No PDFs were found on page: %s", settings.listing_url)
                pdf_urls = select_pdf_urls(pdf_urls)
            else:
                pdf_urls = []

            sources.extend((pdf_url, None) for pdf_url in pdf_urls)
            logger.info("Selected %d document(s) to parse", len(sources))

            for url, data in sources:
                if data is None:
                    data = await scraper.fetch_pdf(url)

                applications = await pipeline.process_pdf(data, url)
                del data
                total_parsed += len(applications)

                if db_manager is not None:
                    inserted, skipped = store_applications(db_manager, applications)
                    total_inserted += inserted
                    total_skipped += skipped
                else:
                    for application in applications:
                        print(f"{application.application_number}\t{application.received_date}\t"
                              f"{application.address}\t{application.description}")

    except (ScraperError, httpx.HTTPError, OSError) as e:
        logger.error("Scrape aborted: %s", e)
        return 1

    logger.info(
        "Scrape complete: parsed=%d inserted=%d skipped=%d",
        total_parsed, total_inserted, total_skipped
    )
    if db_manager is not None:
        with db_manager.session() as session:
            logger.info("Applications stored: %d", DevelopmentApplicationRepository(session).count())
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Scrape development applications from council report PDFs'
    )
    parser.add_argument('--pdf-url', action='append', default=[],
                        help='Report PDF URL to parse instead of the listing page selection (repeatable)')
    parser.add_argument('--pdf-file', action='append', default=[],
                        help='Local report PDF to parse (repeatable)')
    parser.add_argument('--database-url', type=str, default=None,
                        help=f'Database URL (default: {settings.database_url})')
    parser.add_argument('--gazetteer-dir', type=str, default=None,
                        help='Directory holding streetnames.txt, streetsuffixes.txt and suburbnames.txt')
    parser.add_argument('--cache-dir', type=str, default=None,
                        help='Directory for cached OCR elements; cached pages skip OCR')
    parser.add_argument('--annotate-dir', type=str, default=None,
                        help='Directory to write OCR images with element boxes drawn')
    parser.add_argument('--dry-run', action='store_true',
                        help='Print parsed applications instead of storing them')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    return asyncio.run(scrape(args))


if __name__ == '__main__':
    sys.exit(main())
