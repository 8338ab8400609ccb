"""
Embedded media extraction and picture reference lookup.
"""

import posixpath
from typing import Dict

from slidevector.errors import UnresolvedAsset
from slidevector.extractors.package import PART_ERRORS, PresentationPackage
from slidevector.models import MediaAsset

MEDIA_PREFIX = "ppt/media/"

CONTENT_TYPES: Dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "webp": "image/webp",
    # Legacy metafiles: kept in the table, never drawn
    "emf": "image/x-emf",
    "wmf": "image/x-wmf",
}

NON_RENDERABLE_TYPES = {"image/x-emf", "image/x-wmf"}

DEFAULT_CONTENT_TYPE = "image/png"


def content_type_for(part_path: str) -> str:
    ext = posixpath.splitext(part_path)[1].lstrip(".").lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


class MediaExtractor:
    """Encodes every part under ppt/media/ into an addressable table.

    Run once per job; the table is shared read-only by all slides.
    """

    def extract_all(self, package: PresentationPackage) -> Dict[str, MediaAsset]:
        media: Dict[str, MediaAsset] = {}
        for path in sorted(package.part_names):
            if not path.startswith(MEDIA_PREFIX):
                continue
            try:
                data = package.part(path)
            except PART_ERRORS as e:
                print(f"[Media] Error extracting {path}: {e}")
                continue
            content_type = content_type_for(path)
            media[path] = MediaAsset.from_bytes(
                path,
                data,
                content_type,
                renderable=content_type not in NON_RENDERABLE_TYPES,
            )
        return media


def resolve_asset(
    resource_id: str,
    relationships: Dict[str, str],
    media: Dict[str, MediaAsset],
) -> MediaAsset:
    """rId -> part path -> asset. Any miss raises UnresolvedAsset."""
    part_path = relationships.get(resource_id)
    if part_path is None:
        raise UnresolvedAsset(f"Relationship {resource_id!r} not found")
    asset = media.get(part_path)
    if asset is None:
        raise UnresolvedAsset(f"No media part at {part_path}")
    if not asset.renderable:
        raise UnresolvedAsset(f"Unsupported media format {asset.content_type} at {part_path}")
    return asset
