"""
SlideVector: Convert PPTX presentations into per-slide SVG images.

A deterministic pipeline that reads the OOXML package, resolves the theme
palette, decodes each slide into drawable elements and renders them onto a
fixed canvas.
"""

__version__ = "0.1.0"
__author__ = "SlideVector Team"

from slidevector.config import ConversionSettings
from slidevector.errors import (
    SlideVectorError,
    ArchiveUnreadable,
    NoSlidesFound,
    UnsupportedInputFormat,
)
from slidevector.models import ConversionResult, SlideImage, DecodedSlide
from slidevector.pipeline import SlideVectorPipeline

__all__ = [
    "ConversionSettings",
    "SlideVectorError",
    "ArchiveUnreadable",
    "NoSlidesFound",
    "UnsupportedInputFormat",
    "ConversionResult",
    "SlideImage",
    "DecodedSlide",
    "SlideVectorPipeline",
]
