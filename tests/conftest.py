"""
Shared fixtures: synthetic PPTX packages built part by part.
"""

import io
import zipfile
from typing import Dict, List, Optional, Set

import pytest

NSDECLS = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)

RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
IMAGE_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"

# Smallest valid PNG (1x1 transparent pixel)
TINY_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d4944415478da63f8ffff3f0005fe02fea7d6a4b800"
    "00000049454e44ae426082"
)


def _xfrm(x: int, y: int, cx: int, cy: int, rot: int = 0) -> str:
    rot_attr = f' rot="{rot}"' if rot else ""
    return f'<a:xfrm{rot_attr}><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'


def _mark_encrypted(data: bytes, names: Set[str]) -> bytes:
    """Set the encryption flag bit on the central directory entries of names."""
    if not names:
        return data
    patched = bytearray(data)
    end = patched.rfind(b"PK\x05\x06")
    count = int.from_bytes(patched[end + 10:end + 12], "little")
    pos = int.from_bytes(patched[end + 16:end + 20], "little")
    for _ in range(count):
        name_len, extra_len, comment_len = (
            int.from_bytes(patched[pos + offset:pos + offset + 2], "little") for offset in (28, 30, 32)
        )
        name = patched[pos + 46:pos + 46 + name_len].decode("utf-8")
        if name in names:
            patched[pos + 8] |= 0x01
        pos += 46 + name_len + extra_len + comment_len
    return bytes(patched)


class DeckBuilder:
    """Builds PPTX bytes with exactly the parts a test needs."""

    def __init__(self, width: Optional[int] = 9144000, height: Optional[int] = 6858000):
        self.width = width
        self.height = height
        self.slides: List[str] = []
        self.rels: Dict[int, str] = {}
        self.media: Dict[str, bytes] = {}
        self.theme: Optional[str] = None
        self.presentation: Optional[str] = None
        self.extra_parts: Dict[str, bytes] = {}
        # Parts whose central directory entry claims traditional encryption
        self.encrypted: Set[str] = set()

    # --- XML snippets ---

    @staticmethod
    def slide(*shapes: str, background: str = "") -> str:
        return (
            f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f"<p:sld {NSDECLS}><p:cSld>{background}<p:spTree>"
            '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
            "<p:grpSpPr/>"
            f'{"".join(shapes)}</p:spTree></p:cSld></p:sld>'
        )

    @staticmethod
    def solid_background(color_xml: str) -> str:
        return f"<p:bg><p:bgPr><a:solidFill>{color_xml}</a:solidFill><a:effectLst/></p:bgPr></p:bg>"

    @staticmethod
    def srgb(val: str) -> str:
        return f'<a:srgbClr val="{val}"/>'

    @staticmethod
    def scheme(val: str) -> str:
        return f'<a:schemeClr val="{val}"/>'

    @staticmethod
    def run(
        text: str,
        size: Optional[int] = None,
        bold: bool = False,
        italic: bool = False,
        color_xml: str = "",
        typeface: Optional[str] = None,
    ) -> str:
        attrs = ' lang="en-US"'
        if size is not None:
            attrs += f' sz="{size}"'
        if bold:
            attrs += ' b="1"'
        if italic:
            attrs += ' i="1"'
        inner = f"<a:solidFill>{color_xml}</a:solidFill>" if color_xml else ""
        if typeface:
            inner += f'<a:latin typeface="{typeface}"/>'
        return f"<a:r><a:rPr{attrs}>{inner}</a:rPr><a:t>{text}</a:t></a:r>"

    @staticmethod
    def paragraph(*runs: str, algn: Optional[str] = None, lvl: int = 0, bullet: str = "") -> str:
        attrs = f' algn="{algn}"' if algn else ""
        if lvl:
            attrs += f' lvl="{lvl}"'
        ppr = f"<a:pPr{attrs}>{bullet}</a:pPr>" if (attrs or bullet) else ""
        return f"<a:p>{ppr}{''.join(runs)}</a:p>"

    @staticmethod
    def text_box(
        x: int,
        y: int,
        cx: int,
        cy: int,
        *paragraphs: str,
        fill_xml: str = "",
        line_xml: str = "",
        rot: int = 0,
        shape_id: int = 2,
    ) -> str:
        fill = f"<a:solidFill>{fill_xml}</a:solidFill>" if fill_xml else ""
        return (
            f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="TextBox {shape_id}"/>'
            '<p:cNvSpPr txBox="1"/><p:nvPr/></p:nvSpPr>'
            f'<p:spPr>{_xfrm(x, y, cx, cy, rot)}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
            f"{fill}{line_xml}</p:spPr>"
            f'<p:txBody><a:bodyPr/><a:lstStyle/>{"".join(paragraphs)}</p:txBody></p:sp>'
        )

    @staticmethod
    def shape(
        x: int,
        y: int,
        cx: int,
        cy: int,
        fill_xml: str = "",
        line_xml: str = "",
        rot: int = 0,
        shape_id: int = 3,
    ) -> str:
        fill = f"<a:solidFill>{fill_xml}</a:solidFill>" if fill_xml else ""
        return (
            f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="Shape {shape_id}"/>'
            "<p:cNvSpPr/><p:nvPr/></p:nvSpPr>"
            f'<p:spPr>{_xfrm(x, y, cx, cy, rot)}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
            f"{fill}{line_xml}</p:spPr></p:sp>"
        )

    @staticmethod
    def line(color_xml: str, width_emu: Optional[int] = None) -> str:
        w = f' w="{width_emu}"' if width_emu is not None else ""
        return f"<a:ln{w}><a:solidFill>{color_xml}</a:solidFill></a:ln>"

    @staticmethod
    def picture(x: int, y: int, cx: int, cy: int, r_id: str = "rId2", shape_id: int = 4) -> str:
        return (
            f'<p:pic><p:nvPicPr><p:cNvPr id="{shape_id}" name="Picture {shape_id}"/>'
            '<p:cNvPicPr/><p:nvPr/></p:nvPicPr>'
            f'<p:blipFill><a:blip r:embed="{r_id}"/><a:stretch><a:fillRect/></a:stretch></p:blipFill>'
            f'<p:spPr>{_xfrm(x, y, cx, cy)}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr>'
            "</p:pic>"
        )

    @staticmethod
    def group(off, ext, ch_off, ch_ext, *children: str) -> str:
        return (
            '<p:grpSp><p:nvGrpSpPr><p:cNvPr id="10" name="Group 10"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
            f'<p:grpSpPr><a:xfrm><a:off x="{off[0]}" y="{off[1]}"/><a:ext cx="{ext[0]}" cy="{ext[1]}"/>'
            f'<a:chOff x="{ch_off[0]}" y="{ch_off[1]}"/><a:chExt cx="{ch_ext[0]}" cy="{ch_ext[1]}"/></a:xfrm></p:grpSpPr>'
            f'{"".join(children)}</p:grpSp>'
        )

    @staticmethod
    def theme_xml(**slots: str) -> str:
        """Theme part; each slot value is a full color element."""
        body = "".join(f"<a:{name}>{color}</a:{name}>" for name, color in slots.items())
        return (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Office Theme">'
            f'<a:themeElements><a:clrScheme name="Office">{body}</a:clrScheme></a:themeElements></a:theme>'
        )

    @staticmethod
    def rels_xml(targets: Dict[str, str]) -> str:
        body = "".join(
            f'<Relationship Id="{rid}" Type="{IMAGE_REL}" Target="{target}"/>'
            for rid, target in targets.items()
        )
        return f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><Relationships xmlns="{RELS_NS}">{body}</Relationships>'

    # --- Assembly ---

    def add_slide(self, xml: str, rels: Optional[Dict[str, str]] = None) -> "DeckBuilder":
        self.slides.append(xml)
        if rels is not None:
            self.rels[len(self.slides)] = self.rels_xml(rels)
        return self

    def presentation_xml(self) -> str:
        if self.presentation is not None:
            return self.presentation
        size = ""
        if self.width is not None and self.height is not None:
            size = f'<p:sldSz cx="{self.width}" cy="{self.height}"/>'
        return (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f"<p:presentation {NSDECLS}>{size}<p:notesSz cx=\"6858000\" cy=\"9144000\"/></p:presentation>"
        )

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("[Content_Types].xml", '<?xml version="1.0"?><Types/>')
            zf.writestr("ppt/presentation.xml", self.presentation_xml())
            if self.theme is not None:
                zf.writestr("ppt/theme/theme1.xml", self.theme)
            for number, xml in enumerate(self.slides, start=1):
                zf.writestr(f"ppt/slides/slide{number}.xml", xml)
            for number, xml in self.rels.items():
                zf.writestr(f"ppt/slides/_rels/slide{number}.xml.rels", xml)
            for path, data in self.media.items():
                zf.writestr(path, data)
            for path, data in self.extra_parts.items():
                zf.writestr(path, data)
        return _mark_encrypted(buffer.getvalue(), self.encrypted)


@pytest.fixture
def deck() -> DeckBuilder:
    """A 4:3 deck builder with no slides yet."""
    return DeckBuilder()


@pytest.fixture
def widescreen_deck() -> DeckBuilder:
    """A 16:9 deck builder (12192000 x 6858000 EMU)."""
    return DeckBuilder(width=12192000, height=6858000)


@pytest.fixture
def tiny_png() -> bytes:
    return TINY_PNG


@pytest.fixture
def deck_factory():
    """The DeckBuilder class, for tests that need non-default sizes."""
    return DeckBuilder
