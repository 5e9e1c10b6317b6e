"""
Unit tests for core.constants module.
"""
import re

from core.constants import (
    APPLICATION_NUMBER_SLASH_PATTERN,
    LABEL_MAX_DISTANCE,
    NON_ADDRESS_PREFIXES,
    POSTCODE_PATTERN,
    RECEIVED_DATE_PATTERN,
    STATE_MAX_DISTANCE,
    STREET_MAX_DISTANCE,
    SUBURB_MAX_DISTANCE
)
from config.settings import Settings


class TestThresholds:
    """Tests for fuzzy matching thresholds."""

    def test_distances(self):
        assert STATE_MAX_DISTANCE == 1
        assert SUBURB_MAX_DISTANCE == STREET_MAX_DISTANCE == LABEL_MAX_DISTANCE == 2


class TestPatterns:
    """Tests for text patterns."""

    def test_postcode(self):
        assert re.match(POSTCODE_PATTERN, "5254")
        assert not re.match(POSTCODE_PATTERN, "52540")

    def test_received_date(self):
        assert re.match(RECEIVED_DATE_PATTERN, "3/07/2017")
        assert not re.match(RECEIVED_DATE_PATTERN, "3/7/2017")

    def test_slash_substitutes(self):
        for character in "IlL[]|’,!":
            assert re.fullmatch(APPLICATION_NUMBER_SLASH_PATTERN, character)

    def test_non_address_prefixes(self):
        assert NON_ADDRESS_PREFIXES == ('Dev Cost', 'LOT:', 'LOT ', 'HD:', 'HD ')


class TestSettings:
    """Tests for settings defaults and overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv('DATABASE_URL', raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///data.sqlite"
        assert settings.label_text == "Dev App No."
        assert settings.get_segmentation_params() == {
            'min_area': 250000,
            'white_threshold': 240,
            'max_dark_pixels': 2,
            'min_white_band': 25,
        }
        assert settings.get_address_params()['containment_ratio_threshold'] == 0.9

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv('MORPH_PROXY', 'http://proxy.example.com:8080')
        monkeypatch.setenv('SEGMENT_MIN_WHITE_BAND', '30')
        settings = Settings(_env_file=None)
        assert settings.morph_proxy == 'http://proxy.example.com:8080'
        assert settings.segment_min_white_band == 30
