"""
Image utilities for the application scraping workflow.

Handles conversion of images embedded in PDF documents and saving images
for inspection.
"""
from io import BytesIO
from pathlib import Path

import fitz  # PyMuPDF
import numpy as np
from PIL import Image, ImageOps


def pixmap_to_image(pixmap: fitz.Pixmap) -> Image.Image:
    """
    Convert a PyMuPDF pixmap (as extracted from a PDF) to an RGB PIL Image.

    Monochrome, greyscale, CMYK and alpha pixmaps are all converted to RGB.

    Args:
        pixmap: Pixmap of an embedded PDF image

    Returns:
        PIL Image in RGB mode
    """
    if pixmap.colorspace is None:
        # Stencil masks carry a single channel and no colour space; painted
        # samples are 255 and are drawn as black ink on white paper
        mask = Image.frombytes("L", (pixmap.width, pixmap.height), pixmap.samples)
        return ImageOps.invert(mask).convert("RGB")
    if pixmap.alpha:
        pixmap = fitz.Pixmap(pixmap, 0)  # drop the alpha channel
    if pixmap.colorspace.n != 3:
        pixmap = fitz.Pixmap(fitz.csRGB, pixmap)
    return Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)


def image_to_array(image: Image.Image) -> np.ndarray:
    """Get the pixels of an image as a height x width x 3 array."""
    if image.mode != 'RGB':
        image = image.convert('RGB')
    return np.asarray(image)


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Encode an image as PNG."""
    buf = BytesIO()
    image.save(buf, format='PNG')
    return buf.getvalue()


def save_image(image: Image.Image, directory: str, filename: str) -> Path:
    """
    Save an image as PNG, creating the directory if needed.

    Args:
        image: PIL Image to save
        directory: Output directory
        filename: File name (without directory)

    Returns:
        Path of the written file
    """
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    target = path / filename
    image.save(target, format='PNG')
    return target
