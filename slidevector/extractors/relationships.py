"""
Slide relationship parts: rId -> part path.
"""

import posixpath
from typing import Dict

from pptx.opc.constants import NAMESPACE, RELATIONSHIP_TARGET_MODE as RTM

from slidevector.extractors.package import PART_ERRORS, PresentationPackage

RELATIONSHIP_TAG = f"{{{NAMESPACE.OPC_RELATIONSHIPS}}}Relationship"
RELS_PART_TEMPLATE = "ppt/slides/_rels/slide{number}.xml.rels"


def resolve_target(source_part: str, target: str) -> str:
    """Resolve a relationship target relative to the folder of its source part.

    >>> resolve_target("ppt/slides/slide1.xml", "../media/image1.png")
    'ppt/media/image1.png'
    """
    if target.startswith("/"):
        return posixpath.normpath(target).lstrip("/")
    base_dir = posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base_dir, target))


def resolve_relationships(package: PresentationPackage, slide_number: int) -> Dict[str, str]:
    """Map each internal relationship id of a slide to a package part path.

    A missing rels part gives an empty mapping; pictures on that slide simply
    fail to resolve later.
    """
    rels_path = RELS_PART_TEMPLATE.format(number=slide_number)
    slide_path = f"ppt/slides/slide{slide_number}.xml"

    try:
        root = package.xml(rels_path)
    except PART_ERRORS as e:
        print(f"[Slide {slide_number}] Error parsing relationships: {e}")
        return {}
    if root is None:
        return {}

    rels: Dict[str, str] = {}
    for rel in root.iter(RELATIONSHIP_TAG):
        rel_id = rel.get("Id")
        target = rel.get("Target")
        if not rel_id or not target:
            continue
        if rel.get("TargetMode") == RTM.EXTERNAL:
            continue
        rels[rel_id] = resolve_target(slide_path, target)
    return rels
