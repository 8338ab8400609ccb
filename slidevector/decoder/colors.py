"""
Color resolution: literal RGB > theme slot > default.
"""

from typing import Optional

from lxml import etree
from pptx.oxml.ns import qn

from slidevector.extractors.theme import normalize_hex
from slidevector.models import ThemePalette

WHITE = "#FFFFFF"
BLACK = "#000000"


def resolve_color(
    fill: Optional[etree._Element],
    palette: ThemePalette,
    default: str = WHITE,
) -> str:
    """Resolve the color carried by a fill node (a:solidFill, a:gs, ...)."""
    color = literal_color(fill, palette)
    return color if color is not None else default


def literal_color(fill: Optional[etree._Element], palette: ThemePalette) -> Optional[str]:
    if fill is None:
        return None

    srgb = fill.find(qn("a:srgbClr"))
    if srgb is not None:
        color = normalize_hex(srgb.get("val"))
        if color is not None:
            return color

    scheme = fill.find(qn("a:schemeClr"))
    if scheme is not None:
        color = palette.get(scheme.get("val", ""))
        if color is not None:
            return color

    sys_clr = fill.find(qn("a:sysClr"))
    if sys_clr is not None:
        return normalize_hex(sys_clr.get("lastClr"))

    return None


def fill_color(props: Optional[etree._Element], palette: ThemePalette) -> Optional[str]:
    """Solid fill of a shape property block (p:spPr / p:bgPr), or the first gradient stop."""
    if props is None:
        return None
    solid = props.find(qn("a:solidFill"))
    if solid is not None:
        return resolve_color(solid, palette)
    first_stop = props.find(f"{qn('a:gradFill')}/{qn('a:gsLst')}/{qn('a:gs')}")
    if first_stop is not None:
        return resolve_color(first_stop, palette)
    return None
