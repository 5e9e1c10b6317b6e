"""
Configuration management using Pydantic Settings.

Environment variables:
- LISTING_URL: Council page that links to the development application PDFs
- COMMENT_URL: Address the public can send comments to
- DATABASE_URL: SQLAlchemy database URL
- GAZETTEER_DIR: Directory holding streetnames.txt, streetsuffixes.txt and suburbnames.txt
- TESSERACT_CMD: Path to the tesseract binary (optional)
- MORPH_PROXY: HTTP proxy used for all requests (optional)
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Council
    listing_url: str = "http://www.murraybridge.sa.gov.au/page.aspx?u=1022"
    comment_url: str = "mailto:council@murraybridge.sa.gov.au"

    # Database Configuration
    database_url: str = "sqlite:///data.sqlite"

    # Gazetteer
    gazetteer_dir: str = "."

    # HTTP
    morph_proxy: Optional[str] = None
    request_timeout: float = 120.0
    request_delay_min: float = 2.0
    request_delay_max: float = 7.0

    # OCR Parameters
    tesseract_cmd: Optional[str] = None
    ocr_language: str = "eng"
    ocr_config: str = "-c textord_old_baselines=0"

    # Image segmentation (tuned against the council's scanned reports)
    segment_min_area: int = 500 * 500
    segment_white_threshold: int = 240
    segment_max_dark_pixels: int = 2
    segment_min_white_band: int = 25

    # Row grouping
    label_text: str = "Dev App No."
    label_max_tokens: int = 3
    label_raise_factor: float = 2.0

    # Address line search
    address_gap_threshold: int = 50
    address_gap_min_confidence: int = 60
    address_containment_ratio: float = 0.9

    # Optional output
    cache_dir: Optional[str] = None
    annotate_dir: Optional[str] = None

    def get_segmentation_params(self) -> dict:
        """Get image segmentation parameters as dictionary."""
        return {
            'min_area': self.segment_min_area,
            'white_threshold': self.segment_white_threshold,
            'max_dark_pixels': self.segment_max_dark_pixels,
            'min_white_band': self.segment_min_white_band,
        }

    def get_address_params(self) -> dict:
        """Get address line search parameters as dictionary."""
        return {
            'gap_threshold': self.address_gap_threshold,
            'gap_min_confidence': self.address_gap_min_confidence,
            'containment_ratio_threshold': self.address_containment_ratio,
        }


# Global settings instance
settings = Settings()
