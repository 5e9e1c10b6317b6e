"""
Pytest configuration and global fixtures.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import Element, Gazetteer
from data.db_models import Base


@pytest.fixture(scope="session")
def test_db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def test_db_session(test_db_engine):
    """Create fresh database session for each test."""
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    # Rollback any uncommitted changes and close
    session.rollback()
    session.close()


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path


@pytest.fixture
def make_element():
    """Factory for elements; width defaults to 10 pixels per character."""
    def _make(text, x, y, width=None, height=20, confidence=90.0):
        if width is None:
            width = 10 * max(len(text), 1)
        return Element(x=x, y=y, width=width, height=height, text=text, confidence=confidence)
    return _make


@pytest.fixture
def gazetteer():
    """Small gazetteer covering the synthetic report addresses."""
    return Gazetteer.from_dicts(
        street_names={
            'Smith Road': ['Callington'],
            'Bremer Range Road': ['Callington'],
            'Adelaide Road': ['Murray Bridge', 'Callington'],
        },
        street_suffixes={'rd': 'Road', 'st': 'Street', 'tce': 'Terrace'},
        suburb_names={
            'callington': 'SA 5254',
            'murray bridge': 'SA 5253',
            'mobilong': 'SA 5253',
        }
    )


@pytest.fixture
def gazetteer_dir(temp_dir):
    """Directory holding the three gazetteer files."""
    (temp_dir / 'streetnames.txt').write_text(
        'Smith Road,Callington\r\nBremer Range Road,Callington\r\n\r\n'
        'Adelaide Road,Murray Bridge\r\nAdelaide Road,Callington\r\n',
        encoding='utf-8'
    )
    (temp_dir / 'streetsuffixes.txt').write_text('RD,Road\nST,Street\nTCE,Terrace\n', encoding='utf-8')
    (temp_dir / 'suburbnames.txt').write_text(
        'Callington,"SA 5254"\nMurray Bridge,"SA 5253"\nMobilong,"SA 5253"\n',
        encoding='utf-8'
    )
    return temp_dir


def build_application_elements(make_element, top=100, address_words=None, street_words=None):
    """
    Lay out the elements of one report row the way the council prints them.

    The "Dev App No." label and application number run along the top, the
    lodged date and description sit in the right hand column above the
    "Applicant" label, and the address sits above "Assessment Number".
    """
    if address_words is None:
        address_words = ['12', 'Smith', 'RD', 'CALLINGTON', 'SA', '5254']

    elements = [
        make_element('Dev', 10, top, width=40),
        make_element('App', 55, top, width=40),
        make_element('No.', 100, top, width=30),
        make_element('17/2017', 150, top, width=80),
        make_element('3/07/2017', 600, top, width=90),
        make_element('Retail', 600, top + 40, width=55),
        make_element('Fitout', 660, top + 40, width=55),
        make_element('-', 720, top + 42, width=10),
        make_element('Shop', 735, top + 40, width=45),
        make_element('7', 785, top + 40, width=10),
        make_element('Applicant', 600, top + 120, width=100),
        make_element('Assessment', 10, top + 160, width=100),
        make_element('Number', 115, top + 160, width=60),
    ]

    x = 10
    for word in address_words:
        elements.append(make_element(word, x, top + 100))
        x += 10 * len(word) + 5

    if street_words:
        x = 10
        for word in street_words:
            elements.append(make_element(word, x, top + 60))
            x += 10 * len(word) + 5

    return elements


@pytest.fixture
def application_elements(make_element):
    """Elements of a single, cleanly recognised application."""
    return build_application_elements(make_element)


@pytest.fixture
def layout_builder(make_element):
    """Builder for report rows with custom address lines."""
    def _build(**kwargs):
        return build_application_elements(make_element, **kwargs)
    return _build
