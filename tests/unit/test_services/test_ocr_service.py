"""
Unit tests for services.ocr_service module.
"""
import asyncio

import pytest
import pytesseract
from PIL import Image

from core.exceptions import OcrError
from services.ocr_service import OCRService, flatten_recognition


def _tesseract_rows(words):
    """Build image_to_data style output; each word is (text, block, par, line, left, top, conf)."""
    data = {key: [] for key in (
        'level', 'page_num', 'block_num', 'par_num', 'line_num', 'word_num',
        'left', 'top', 'width', 'height', 'conf', 'text'
    )}
    # Page level row, which is never a word
    for key, value in (('level', 1), ('page_num', 1), ('block_num', 0), ('par_num', 0), ('line_num', 0),
                       ('word_num', 0), ('left', 0), ('top', 0), ('width', 800), ('height', 600),
                       ('conf', -1), ('text', '')):
        data[key].append(value)
    for number, (text, block, par, line, left, top, conf) in enumerate(words, start=1):
        for key, value in (('level', 5), ('page_num', 1), ('block_num', block), ('par_num', par),
                           ('line_num', line), ('word_num', number), ('left', left), ('top', top),
                           ('width', 10 * len(text)), ('height', 20), ('conf', conf), ('text', text)):
            data[key].append(value)
    return data


class TestFlattenRecognition:
    """Tests for flatten_recognition function."""

    def test_flatten_with_offset(self):
        result = {'blocks': [{'paragraphs': [{'lines': [{'words': [
            {'text': 'Dev', 'confidence': 91.5, 'choices': ['Dev', 'Dew'],
             'bbox': {'x0': 10, 'y0': 20, 'x1': 40, 'y1': 40}},
        ]}]}]}]}

        elements = flatten_recognition(result, offset_x=100, offset_y=200)

        assert len(elements) == 1
        element = elements[0]
        assert (element.x, element.y, element.width, element.height) == (110, 220, 30, 20)
        assert element.text == 'Dev'
        assert element.confidence == 91.5
        assert element.choice_count == 2

    def test_empty_result(self):
        assert flatten_recognition({'blocks': None}) == []
        assert flatten_recognition({}) == []


class TestOCRService:
    """Tests for OCRService with Tesseract replaced."""

    def test_recognize_groups_words(self, monkeypatch):
        data = _tesseract_rows([
            ('Dev', 1, 1, 1, 10, 100, 96),
            ('App', 1, 1, 1, 55, 100, 95),
            ('', 1, 1, 1, 90, 100, -1),
            ('Applicant', 2, 1, 1, 600, 220, '88.5'),
            ('Shed', 2, 1, 2, 600, 260, -1),
        ])
        calls = []

        def fake_image_to_data(image, lang, config, output_type):
            calls.append((lang, config, output_type))
            return data

        monkeypatch.setattr(pytesseract, 'image_to_data', fake_image_to_data)
        service = OCRService(language='eng', config='-c textord_old_baselines=0')

        result = asyncio.run(service.recognize(Image.new('RGB', (800, 600), 'white')))

        assert calls == [('eng', '-c textord_old_baselines=0', pytesseract.Output.DICT)]
        assert len(result['blocks']) == 2
        first_line = result['blocks'][0]['paragraphs'][0]['lines'][0]['words']
        assert [w['text'] for w in first_line] == ['Dev', 'App']
        assert first_line[0]['bbox'] == {'x0': 10, 'y0': 100, 'x1': 40, 'y1': 120}
        second_block_lines = result['blocks'][1]['paragraphs'][0]['lines']
        assert len(second_block_lines) == 2
        assert second_block_lines[0]['words'][0]['confidence'] == 88.5
        assert second_block_lines[1]['words'][0]['confidence'] == 0

    def test_recognize_elements_offsets(self, monkeypatch):
        monkeypatch.setattr(pytesseract, 'image_to_data',
                            lambda image, lang, config, output_type: _tesseract_rows([('No.', 1, 1, 1, 5, 5, 90)]))
        service = OCRService()

        elements = asyncio.run(service.recognize_elements(Image.new('RGB', (50, 50), 'white'), 100, 50))

        assert [(e.text, e.x, e.y) for e in elements] == [('No.', 105, 55)]

    def test_missing_tesseract(self, monkeypatch):
        def fail(*args, **kwargs):
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, 'image_to_data', fail)

        with pytest.raises(OcrError):
            asyncio.run(OCRService().recognize(Image.new('RGB', (10, 10), 'white')))
