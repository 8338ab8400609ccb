"""
Presentation-level metadata: slide size and slide part order.
"""

from typing import List

from pptx.oxml.ns import qn

from slidevector.extractors.package import PART_ERRORS, PresentationPackage
from slidevector.models import CanvasSize

PRESENTATION_PART = "ppt/presentation.xml"
SLIDE_PART_TEMPLATE = "ppt/slides/slide{number}.xml"


def scan_canvas_size(package: PresentationPackage) -> CanvasSize:
    """Read p:sldSz from presentation.xml, falling back to the 4:3 default.

    Never raises: geometry metadata is not worth failing a job over.
    """
    try:
        root = package.xml(PRESENTATION_PART)
        if root is None:
            return CanvasSize.default()
        size = root.find(qn("p:sldSz"))
        if size is None:
            return CanvasSize.default()
        cx = int(size.get("cx", ""))
        cy = int(size.get("cy", ""))
        if cx <= 0 or cy <= 0:
            return CanvasSize.default()
        return CanvasSize(width_units=cx, height_units=cy)
    except (ValueError, *PART_ERRORS) as e:
        print(f"[Presentation] Unreadable slide size, using 4:3 default: {e}")
        return CanvasSize.default()


def slide_part_path(number: int) -> str:
    return SLIDE_PART_TEMPLATE.format(number=number)


def list_slide_parts(package: PresentationPackage) -> List[str]:
    """Slide parts numbered from 1, stopping at the first missing number."""
    parts = []
    number = 1
    while package.has_part(slide_part_path(number)):
        parts.append(slide_part_path(number))
        number += 1
    return parts
