"""
Core domain models for the application scraping workflow.

These are pure data structures without business logic.
"""
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in page-image coordinates (y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


EMPTY_RECTANGLE = Rectangle(0, 0, 0, 0)


@dataclass(frozen=True)
class Element(Rectangle):
    """A word recognised by OCR, positioned on the page."""
    text: str = ""
    confidence: float = 0.0
    choice_count: int = 0

    def moved_to(self, y: float) -> "Element":
        """Return a copy of the element at a different vertical position."""
        return replace(self, y=y)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'text': self.text,
            'confidence': self.confidence,
            'choice_count': self.choice_count,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Element":
        """Create an element from a dictionary produced by to_dict."""
        return cls(
            x=data['x'],
            y=data['y'],
            width=data['width'],
            height=data['height'],
            text=data.get('text', ''),
            confidence=data.get('confidence', 0.0),
            choice_count=data.get('choice_count', 0)
        )


@dataclass
class ImageSegment:
    """A cropped part of a larger image and its offset within that image."""
    image: Any
    bounds: Rectangle


@dataclass
class ApplicationElementGroup:
    """Elements lying between one row label and the next."""
    start_element: Element
    elements: List[Element] = field(default_factory=list)


@dataclass(frozen=True)
class FormattedAddress:
    """Result of matching raw address text against the gazetteer."""
    text: str
    has_suburb: bool
    has_street: bool


@dataclass(frozen=True)
class DevelopmentApplication:
    """A development application ready to be stored."""
    application_number: str
    address: str
    description: str
    information_url: str
    comment_url: str
    scrape_date: str
    received_date: str = ""


@dataclass(frozen=True)
class Gazetteer:
    """
    Read-only reference tables used to correct OCR'd addresses.

    street_names maps a street name to every suburb it runs through,
    street_suffixes maps a lowercase abbreviation to the full word and
    suburb_names maps a lowercase suburb name to "STATE Postcode".
    """
    street_names: Mapping[str, Tuple[str, ...]]
    street_suffixes: Mapping[str, str]
    suburb_names: Mapping[str, str]

    @classmethod
    def from_dicts(
        cls,
        street_names: Dict[str, List[str]],
        street_suffixes: Dict[str, str],
        suburb_names: Dict[str, str]
    ) -> "Gazetteer":
        """Freeze plain dictionaries into a gazetteer."""
        return cls(
            street_names=MappingProxyType({
                name: tuple(suburbs) for name, suburbs in street_names.items()
            }),
            street_suffixes=MappingProxyType(dict(street_suffixes)),
            suburb_names=MappingProxyType(dict(suburb_names))
        )
