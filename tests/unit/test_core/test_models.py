"""
Unit tests for core.models module.
"""
import dataclasses

import pytest

from core.models import (
    ApplicationElementGroup,
    DevelopmentApplication,
    Element,
    Gazetteer,
    Rectangle
)


class TestRectangle:
    """Tests for Rectangle and Element."""

    def test_edges(self):
        rect = Rectangle(10, 20, 30, 40)
        assert rect.right == 40
        assert rect.bottom == 60

    def test_element_is_immutable(self):
        element = Element(0, 0, 10, 10, text="Dev")
        with pytest.raises(dataclasses.FrozenInstanceError):
            element.text = "App"

    def test_moved_to(self):
        element = Element(5, 50, 10, 10, text="Dev", confidence=80)
        moved = element.moved_to(20)
        assert moved == Element(5, 20, 10, 10, text="Dev", confidence=80)
        assert element.y == 50

    def test_dict_round_trip(self):
        element = Element(1, 2, 3, 4, text="No.", confidence=55.5, choice_count=2)
        assert Element.from_dict(element.to_dict()) == element


class TestApplicationElementGroup:
    """Tests for ApplicationElementGroup."""

    def test_default_elements(self):
        group = ApplicationElementGroup(start_element=Element(0, 0, 1, 1))
        assert group.elements == []


class TestDevelopmentApplication:
    """Tests for DevelopmentApplication."""

    def test_default_received_date(self):
        application = DevelopmentApplication(
            application_number="17/2017",
            address="12 Smith Road, SA 5254",
            description="Shed",
            information_url="http://example.com/a.pdf",
            comment_url="mailto:council@example.com",
            scrape_date="2017-08-01"
        )
        assert application.received_date == ""


class TestGazetteer:
    """Tests for Gazetteer."""

    def test_from_dicts_copies(self):
        suburbs = {'callington': 'SA 5254'}
        gazetteer = Gazetteer.from_dicts({'Smith Road': ['Callington']}, {'rd': 'Road'}, suburbs)
        suburbs['mobilong'] = 'SA 5253'

        assert 'mobilong' not in gazetteer.suburb_names
        assert gazetteer.street_names['Smith Road'] == ('Callington',)
