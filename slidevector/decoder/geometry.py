"""
EMU -> canvas pixel mapping.

One pair of linear factors is computed per document and shared by every
slide, so an element spanning the whole slide always spans the whole canvas
regardless of the document's aspect ratio.
"""

import math
from typing import NamedTuple, Optional

from lxml import etree
from pptx.oxml.ns import qn

from slidevector.models import CanvasSize, Frame

ROTATION_UNITS_PER_DEGREE = 60000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def int_attr(node: Optional[etree._Element], name: str, default: int = 0) -> int:
    """Integer attribute of an XML node; missing or malformed values give the default."""
    if node is None:
        return default
    try:
        return int(node.get(name, default))
    except (TypeError, ValueError):
        return default


class ScaleFactors(NamedTuple):
    """Target-canvas pixels per document EMU, on each axis."""

    x: float
    y: float

    @classmethod
    def between(cls, canvas: CanvasSize, target_width: int, target_height: int) -> "ScaleFactors":
        return cls(target_width / canvas.width_units, target_height / canvas.height_units)

    def to_pixel_x(self, emu: float) -> int:
        return round_half_up(emu * self.x)

    def to_pixel_y(self, emu: float) -> int:
        return round_half_up(emu * self.y)


class GroupTransform(NamedTuple):
    """Affine map from a group's child EMU space into slide EMU space."""

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    def apply_x(self, emu: float) -> float:
        return self.offset_x + emu * self.scale_x

    def apply_y(self, emu: float) -> float:
        return self.offset_y + emu * self.scale_y

    def nested(self, xfrm: Optional[etree._Element]) -> "GroupTransform":
        """Compose with a group's a:xfrm (off/ext mapped from chOff/chExt)."""
        if xfrm is None:
            return self
        off = xfrm.find(qn("a:off"))
        ext = xfrm.find(qn("a:ext"))
        ch_off = xfrm.find(qn("a:chOff"))
        ch_ext = xfrm.find(qn("a:chExt"))

        cx = int_attr(ext, "cx")
        cy = int_attr(ext, "cy")
        ch_cx = int_attr(ch_ext, "cx", cx)
        ch_cy = int_attr(ch_ext, "cy", cy)
        sx = cx / ch_cx if ch_cx else 1.0
        sy = cy / ch_cy if ch_cy else 1.0

        # child point p maps to off + (p - chOff) * s
        local_x = int_attr(off, "x") - int_attr(ch_off, "x") * sx
        local_y = int_attr(off, "y") - int_attr(ch_off, "y") * sy
        return GroupTransform(
            offset_x=self.apply_x(local_x),
            offset_y=self.apply_y(local_y),
            scale_x=self.scale_x * sx,
            scale_y=self.scale_y * sy,
        )


IDENTITY = GroupTransform()


def frame_from_xfrm(
    xfrm: Optional[etree._Element],
    scale: ScaleFactors,
    group: GroupTransform = IDENTITY,
) -> Frame:
    """Canvas-space frame of an a:xfrm; a missing transform gives an empty frame at the origin."""
    if xfrm is None:
        return Frame(x=0, y=0, width=0, height=0, rotation=0.0)

    off = xfrm.find(qn("a:off"))
    ext = xfrm.find(qn("a:ext"))
    x = group.apply_x(int_attr(off, "x"))
    y = group.apply_y(int_attr(off, "y"))
    cx = int_attr(ext, "cx") * group.scale_x
    cy = int_attr(ext, "cy") * group.scale_y

    return Frame(
        x=scale.to_pixel_x(x),
        y=scale.to_pixel_y(y),
        width=scale.to_pixel_x(cx),
        height=scale.to_pixel_y(cy),
        rotation=int_attr(xfrm, "rot") / ROTATION_UNITS_PER_DEGREE,
    )
