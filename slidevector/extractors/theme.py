"""
Theme color scheme resolution.

The palette is always complete: parsed slots are merged over the built-in
defaults in a single step.
"""

from typing import Dict, Optional

from lxml import etree
from pptx.oxml.ns import qn

from slidevector.extractors.package import PART_ERRORS, PresentationPackage
from slidevector.models import THEME_SLOTS, ThemePalette

DEFAULT_THEME_COLORS: Dict[str, str] = {
    "dk1": "#000000",
    "lt1": "#FFFFFF",
    "dk2": "#1F497D",
    "lt2": "#EEECE1",
    "accent1": "#4472C4",
    "accent2": "#ED7D31",
    "accent3": "#A5A5A5",
    "accent4": "#FFC000",
    "accent5": "#5B9BD5",
    "accent6": "#70AD47",
    "hlink": "#0563C1",
    "folHlink": "#954F72",
}

PRIMARY_THEME_PART = "ppt/theme/theme1.xml"


def normalize_hex(value: Optional[str]) -> Optional[str]:
    """'4472c4' -> '#4472C4'; anything that is not 6 hex digits -> None."""
    if not value:
        return None
    value = value.strip().lstrip("#")
    if len(value) != 6:
        return None
    try:
        int(value, 16)
    except ValueError:
        return None
    return f"#{value.upper()}"


def find_theme_part(package: PresentationPackage) -> Optional[str]:
    if package.has_part(PRIMARY_THEME_PART):
        return PRIMARY_THEME_PART
    themes = sorted(
        name
        for name in package.part_names
        if name.startswith("ppt/theme/theme") and name.endswith(".xml")
    )
    return themes[0] if themes else None


def parse_scheme_colors(root: etree._Element) -> Dict[str, str]:
    """Literal colors found in a:clrScheme, keyed by slot name."""
    scheme = root.find(f"{qn('a:themeElements')}/{qn('a:clrScheme')}")
    if scheme is None:
        scheme = root.find(f".//{qn('a:clrScheme')}")
    if scheme is None:
        return {}

    overrides: Dict[str, str] = {}
    for slot in THEME_SLOTS:
        slot_el = scheme.find(qn(f"a:{slot}"))
        if slot_el is None:
            continue
        srgb = slot_el.find(qn("a:srgbClr"))
        color = normalize_hex(srgb.get("val")) if srgb is not None else None
        if color is None:
            # System colors only help when the file cached their last value
            sys_clr = slot_el.find(qn("a:sysClr"))
            if sys_clr is not None:
                color = normalize_hex(sys_clr.get("lastClr"))
        if color is not None:
            overrides[slot] = color
    return overrides


def resolve_theme(package: PresentationPackage) -> ThemePalette:
    """Build the job's palette. Never fails; missing data keeps the defaults."""
    overrides: Dict[str, str] = {}
    part = find_theme_part(package)
    if part is not None:
        try:
            overrides = parse_scheme_colors(package.xml(part))
        except PART_ERRORS as e:
            print(f"[Theme] Error parsing {part}: {e}")

    return ThemePalette(colors={**DEFAULT_THEME_COLORS, **overrides})
