"""
Readers for the parts of a PPTX package.

- package: ZIP container access by part path
- presentation: slide size and slide order
- theme: 12-slot color palette
- relationships: per-slide rId mapping
- media: embedded asset table
"""

from slidevector.extractors.package import PresentationPackage
from slidevector.extractors.presentation import scan_canvas_size, list_slide_parts
from slidevector.extractors.theme import resolve_theme, DEFAULT_THEME_COLORS
from slidevector.extractors.relationships import resolve_relationships
from slidevector.extractors.media import MediaExtractor, resolve_asset

__all__ = [
    "PresentationPackage",
    "scan_canvas_size",
    "list_slide_parts",
    "resolve_theme",
    "DEFAULT_THEME_COLORS",
    "resolve_relationships",
    "MediaExtractor",
    "resolve_asset",
]
