"""
Core data models for SlideVector.

Defines the document-level state shared across a job (canvas size, theme
palette, media table), the per-slide element variants produced by the
decoder, and the conversion result returned to callers.
"""

import base64
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# Classic 4:3 slide (10in x 7.5in) used when presentation.xml is unusable
DEFAULT_SLIDE_WIDTH_EMU = 9144000
DEFAULT_SLIDE_HEIGHT_EMU = 6858000

THEME_SLOTS = (
    "dk1",
    "lt1",
    "dk2",
    "lt2",
    "accent1",
    "accent2",
    "accent3",
    "accent4",
    "accent5",
    "accent6",
    "hlink",
    "folHlink",
)

# Slide content may reference text/background roles instead of scheme slots
SLOT_ALIASES = {
    "tx1": "dk1",
    "tx2": "dk2",
    "bg1": "lt1",
    "bg2": "lt2",
}


class CanvasSize(BaseModel):
    """Slide size declared by the document, in EMU."""

    width_units: int = Field(gt=0)
    height_units: int = Field(gt=0)

    model_config = {"frozen": True}

    @classmethod
    def default(cls) -> "CanvasSize":
        return cls(width_units=DEFAULT_SLIDE_WIDTH_EMU, height_units=DEFAULT_SLIDE_HEIGHT_EMU)


class ThemePalette(BaseModel):
    """The 12 scheme color slots of a theme, as '#RRGGBB' strings."""

    colors: Dict[str, str]

    model_config = {"frozen": True}

    def get(self, name: str) -> Optional[str]:
        """Look up a scheme slot or one of its tx/bg aliases."""
        return self.colors.get(SLOT_ALIASES.get(name, name))

    def __getitem__(self, name: str) -> str:
        color = self.get(name)
        if color is None:
            raise KeyError(name)
        return color


class MediaAsset(BaseModel):
    """An embedded binary part, base64-encoded once per job."""

    part_path: str
    encoded_data: str
    content_type: str
    renderable: bool = True

    model_config = {"frozen": True}

    @classmethod
    def from_bytes(cls, part_path: str, data: bytes, content_type: str, renderable: bool = True) -> "MediaAsset":
        return cls(
            part_path=part_path,
            encoded_data=base64.b64encode(data).decode("ascii"),
            content_type=content_type,
            renderable=renderable,
        )

    @property
    def data_url(self) -> str:
        return f"data:{self.content_type};base64,{self.encoded_data}"


# --- Decoded slide elements ---


class Frame(BaseModel):
    """Canvas-space placement of an element, in pixels and degrees."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


class Run(BaseModel):
    """A run of text with resolved styling."""

    text: str
    font_size_pt: float = 24.0
    font_family: str = "Arial"
    bold: bool = False
    italic: bool = False
    color_hex: str = "#000000"


class Paragraph(BaseModel):
    """One paragraph of a text body; rendered as a single line."""

    runs: List[Run] = Field(default_factory=list)
    alignment: Literal["start", "center", "end", "justify"] = "start"
    level: int = Field(ge=0, default=0)
    bullet: Optional[str] = None


class TextBlock(BaseModel):
    """A shape carrying a text body."""

    kind: Literal["text"] = "text"
    frame: Frame
    paragraphs: List[Paragraph] = Field(default_factory=list)
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width_pt: Optional[float] = None


class ShapeBlock(BaseModel):
    """A filled and/or stroked shape without text."""

    kind: Literal["shape"] = "shape"
    frame: Frame
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width_pt: Optional[float] = None


class PictureRef(BaseModel):
    """A picture whose relationship id resolved to a renderable media part."""

    kind: Literal["picture"] = "picture"
    frame: Frame
    resource_id: str
    asset: MediaAsset


VisualElement = Annotated[Union[TextBlock, ShapeBlock, PictureRef], Field(discriminator="kind")]


class DecodedSlide(BaseModel):
    """Background plus elements in paint order. Lives for one slide only."""

    slide_number: int = Field(ge=1)
    background: str = "#FFFFFF"
    elements: List[VisualElement] = Field(default_factory=list)


# --- Conversion output ---


class SlideImage(BaseModel):
    """One rendered slide."""

    slide_number: int = Field(ge=1, serialization_alias="pageNumber")
    image_data: str = Field(serialization_alias="imageData")
    placeholder: bool = Field(default=False, exclude=True)


class ConversionResult(BaseModel):
    """Ordered slide images of one conversion job."""

    images: List[SlideImage] = Field(default_factory=list)
    total_slides: int = Field(ge=0, default=0, serialization_alias="totalSlides")
    message: Optional[str] = None

    @property
    def fallback_slides(self) -> List[int]:
        """Slide numbers that were replaced by the placeholder image."""
        return [image.slide_number for image in self.images if image.placeholder]

    def to_dict(self) -> Dict[str, Any]:
        """Export to the host application's JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
