"""
Slide decoding: one slide's XML tree -> DecodedSlide.

Walks p:spTree in document order and turns every drawable node into a
TextBlock, ShapeBlock or PictureRef with canvas-space geometry and colors
resolved against the job's theme palette.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from lxml import etree
from pptx.oxml.ns import qn
from pptx.util import Centipoints, Emu

from slidevector.decoder.colors import BLACK, WHITE, fill_color, resolve_color
from slidevector.decoder.geometry import (
    IDENTITY,
    GroupTransform,
    ScaleFactors,
    frame_from_xfrm,
    int_attr,
    round_half_up,
)
from slidevector.errors import UnresolvedAsset
from slidevector.extractors.media import resolve_asset
from slidevector.models import (
    DecodedSlide,
    MediaAsset,
    Paragraph,
    PictureRef,
    Run,
    ShapeBlock,
    TextBlock,
    ThemePalette,
)

MC_NS = "http://schemas.openxmlformats.org/markup-compatibility/2006"

ALIGNMENTS = {
    "ctr": "center",
    "r": "end",
    "just": "justify",
}

DEFAULT_BULLET = "•"
DEFAULT_FONT_SIZE_PT = 24.0
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_LINE_WIDTH_EMU = 12700

_SP = qn("p:sp")
_PIC = qn("p:pic")
_GRP = qn("p:grpSp")
_ALTERNATE = f"{{{MC_NS}}}AlternateContent"
_FALLBACK = f"{{{MC_NS}}}Fallback"
_RUN_TAGS = (qn("a:r"), qn("a:fld"))


class SlideDecoder:
    """
    Decodes slides of one document.

    The palette, scale factors and media table are shared read-only state of
    the job; nothing is kept between decode() calls, so one decoder may serve
    several threads.
    """

    def __init__(
        self,
        palette: ThemePalette,
        scale: ScaleFactors,
        media: Dict[str, MediaAsset],
    ):
        self.palette = palette
        self.scale = scale
        self.media = media

    def decode(
        self,
        root: etree._Element,
        relationships: Dict[str, str],
        slide_number: int,
    ) -> DecodedSlide:
        """
        Decode a parsed slide part.

        Raises:
            ValueError: if the part is not a slide (no p:cSld)
        """
        c_sld = root.find(qn("p:cSld"))
        if c_sld is None:
            raise ValueError(f"slide{slide_number}.xml has no p:cSld element")

        sp_tree = c_sld.find(qn("p:spTree"))
        elements = []
        if sp_tree is not None:
            elements = list(self._walk(sp_tree, relationships, IDENTITY))

        return DecodedSlide(
            slide_number=slide_number,
            background=self._background(c_sld),
            elements=promote_pictures(elements),
        )

    def _background(self, c_sld: etree._Element) -> str:
        bg = c_sld.find(qn("p:bg"))
        if bg is None:
            return WHITE
        color = fill_color(bg.find(qn("p:bgPr")), self.palette)
        if color is None:
            # p:bgRef carries its color directly
            color = resolve_color(bg.find(qn("p:bgRef")), self.palette)
        return color

    def _walk(
        self,
        container: etree._Element,
        relationships: Dict[str, str],
        group: GroupTransform,
    ) -> Iterator:
        for node in container:
            if node.tag == _SP:
                element = self._decode_shape(node, group)
            elif node.tag == _PIC:
                element = self._decode_picture(node, relationships, group)
            elif node.tag == _GRP:
                grp_pr = node.find(qn("p:grpSpPr"))
                xfrm = grp_pr.find(qn("a:xfrm")) if grp_pr is not None else None
                yield from self._walk(node, relationships, group.nested(xfrm))
                continue
            elif node.tag == _ALTERNATE:
                fallback = node.find(_FALLBACK)
                if fallback is not None:
                    yield from self._walk(fallback, relationships, group)
                continue
            else:
                continue

            if element is not None:
                yield element

    # --- Shapes ---

    def _decode_shape(self, sp: etree._Element, group: GroupTransform):
        sp_pr = sp.find(qn("p:spPr"))
        if sp_pr is None:
            return None

        frame = frame_from_xfrm(sp_pr.find(qn("a:xfrm")), self.scale, group)
        fill = fill_color(sp_pr, self.palette)
        stroke, stroke_width = self._stroke(sp_pr)

        tx_body = sp.find(qn("p:txBody"))
        paragraphs = self._decode_text(tx_body) if tx_body is not None else []
        if paragraphs:
            return TextBlock(
                frame=frame,
                paragraphs=paragraphs,
                fill_color=fill,
                stroke_color=stroke,
                stroke_width_pt=stroke_width,
            )
        if fill or stroke:
            return ShapeBlock(
                frame=frame,
                fill_color=fill,
                stroke_color=stroke,
                stroke_width_pt=stroke_width,
            )
        return None

    def _stroke(self, sp_pr: etree._Element) -> Tuple[Optional[str], Optional[float]]:
        ln = sp_pr.find(qn("a:ln"))
        if ln is None:
            return None, None
        solid = ln.find(qn("a:solidFill"))
        if solid is None:
            return None, None
        width_pt = Emu(int_attr(ln, "w", DEFAULT_LINE_WIDTH_EMU)).pt
        return resolve_color(solid, self.palette), float(max(1, round_half_up(width_pt)))

    # --- Text ---

    def _decode_text(self, tx_body: etree._Element) -> List[Paragraph]:
        paragraphs = []
        for p in tx_body.findall(qn("a:p")):
            p_pr = p.find(qn("a:pPr"))
            runs = [run for run in (self._decode_run(node) for node in p if node.tag in _RUN_TAGS) if run]
            bullet = self._bullet(p_pr)
            if not runs and bullet is None:
                continue
            paragraphs.append(
                Paragraph(
                    runs=runs,
                    alignment=ALIGNMENTS.get(p_pr.get("algn") if p_pr is not None else None, "start"),
                    level=max(0, int_attr(p_pr, "lvl", 0)),
                    bullet=bullet,
                )
            )
        return paragraphs

    @staticmethod
    def _bullet(p_pr: Optional[etree._Element]) -> Optional[str]:
        if p_pr is None or p_pr.find(qn("a:buNone")) is not None:
            return None
        bu_char = p_pr.find(qn("a:buChar"))
        if bu_char is not None:
            return bu_char.get("char") or DEFAULT_BULLET
        # Auto-numbered lists get a plain marker; the number itself is not reproduced
        if p_pr.find(qn("a:buAutoNum")) is not None:
            return DEFAULT_BULLET
        return None

    def _decode_run(self, node: etree._Element) -> Optional[Run]:
        t = node.find(qn("a:t"))
        if t is None or not t.text:
            return None
        if node.tag == qn("a:fld"):
            # Field placeholders (slide numbers, dates) keep their cached text only
            return Run(text=t.text)

        r_pr = node.find(qn("a:rPr"))
        if r_pr is None:
            return Run(text=t.text)

        sz = int_attr(r_pr, "sz", 0)
        latin = r_pr.find(qn("a:latin"))
        typeface = latin.get("typeface") if latin is not None else None
        if not typeface or typeface.startswith("+"):
            # "+mn-lt" style theme font references are not resolved
            typeface = DEFAULT_FONT_FAMILY

        return Run(
            text=t.text,
            font_size_pt=Centipoints(sz).pt if sz > 0 else DEFAULT_FONT_SIZE_PT,
            font_family=typeface,
            bold=r_pr.get("b") in ("1", "true"),
            italic=r_pr.get("i") in ("1", "true"),
            color_hex=resolve_color(r_pr.find(qn("a:solidFill")), self.palette, default=BLACK),
        )

    # --- Pictures ---

    def _decode_picture(
        self,
        pic: etree._Element,
        relationships: Dict[str, str],
        group: GroupTransform,
    ) -> Optional[PictureRef]:
        sp_pr = pic.find(qn("p:spPr"))
        blip_fill = pic.find(qn("p:blipFill"))
        if sp_pr is None or blip_fill is None:
            return None
        blip = blip_fill.find(qn("a:blip"))
        resource_id = blip.get(qn("r:embed")) if blip is not None else None
        if not resource_id:
            return None

        try:
            asset = resolve_asset(resource_id, relationships, self.media)
        except UnresolvedAsset:
            return None

        return PictureRef(
            frame=frame_from_xfrm(sp_pr.find(qn("a:xfrm")), self.scale, group),
            resource_id=resource_id,
            asset=asset,
        )


def promote_pictures(elements: List) -> List:
    """Paint pictures first so a full-bleed image cannot hide text or shapes.

    The sort is stable: every other element keeps document order.
    """
    return sorted(elements, key=lambda element: 0 if isinstance(element, PictureRef) else 1)
