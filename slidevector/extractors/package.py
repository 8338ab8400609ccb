"""
Read-only access to the parts of a PPTX package.

The whole upload is held in memory; parts are read lazily and cached so
slides can be decoded from several threads against the same package.
"""

import io
import threading
import zipfile
import zlib
from typing import Dict, List, Optional

from lxml import etree

from slidevector.errors import ArchiveUnreadable

# Errors raised when a single part is corrupt, encrypted (RuntimeError),
# stored with an unsupported compression method (NotImplementedError) or
# not well-formed XML
PART_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    etree.XMLSyntaxError,
    RuntimeError,
    NotImplementedError,
)


def parse_xml(data: bytes) -> etree._Element:
    """Parse an XML part without resolving entities or touching the network."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)
    return etree.fromstring(data, parser)


class PresentationPackage:
    """A ZIP container addressed by internal part path (e.g. 'ppt/slides/slide1.xml')."""

    def __init__(self, archive: zipfile.ZipFile):
        self._archive = archive
        self._names = [info.filename for info in archive.infolist() if not info.is_dir()]
        self._known = set(self._names)
        self._cache: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @classmethod
    def open(cls, data: bytes) -> "PresentationPackage":
        """Open a package from raw bytes, failing with ArchiveUnreadable."""
        if not data:
            raise ArchiveUnreadable("The uploaded file is empty")
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise ArchiveUnreadable(f"Could not read presentation archive: {e}") from e
        return cls(archive)

    def __enter__(self) -> "PresentationPackage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._archive.close()
        self._cache.clear()

    @property
    def part_names(self) -> List[str]:
        return list(self._names)

    def has_part(self, path: str) -> bool:
        return path.lstrip("/") in self._known

    def part(self, path: str) -> Optional[bytes]:
        """Return the bytes of a part, or None when the package has no such part."""
        path = path.lstrip("/")
        if path not in self._known:
            return None
        with self._lock:
            if path not in self._cache:
                self._cache[path] = self._archive.read(path)
            return self._cache[path]

    def text(self, path: str, encoding: str = "utf-8") -> Optional[str]:
        data = self.part(path)
        return data.decode(encoding) if data is not None else None

    def xml(self, path: str) -> Optional[etree._Element]:
        """Parse a part as XML. Malformed XML raises lxml's XMLSyntaxError."""
        data = self.part(path)
        if data is None:
            return None
        return parse_xml(data)
