"""
SVG renderer using jinja2 templates.

Paints a DecodedSlide onto the fixed output canvas. Text layout is a
single-pass approximation: one line per paragraph, no wrapping, and the
horizontal advance of start-aligned runs is estimated from character count
rather than glyph metrics. Overlong text overflows its box. The estimate is
part of the output contract; replacing it with real metrics would shift
every rendered slide.
"""

from typing import List, NamedTuple, Optional

from jinja2 import Environment
from markupsafe import Markup

from slidevector.models import (
    DecodedSlide,
    Frame,
    Paragraph,
    PictureRef,
    Run,
    ShapeBlock,
    TextBlock,
)


def format_number(value: float) -> str:
    """Stable coordinate formatting: 144.0 -> '144', 12.3456 -> '12.35'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class TextSegment(NamedTuple):
    run: Run
    x: Optional[float]


class TextLine(NamedTuple):
    x: float
    y: float
    anchor: str
    font_size: float
    bullet: Optional[str]
    bullet_color: str
    segments: List[TextSegment]


class SVGRenderer:
    """
    Render decoded slides to standalone SVG documents.

    Elements are painted in the order the decoder produced them, on top of a
    full-canvas background rect.
    """

    TEXT_PADDING = 10
    INDENT_PER_LEVEL = 30
    BULLET_OFFSET = 20
    MIN_LINE_HEIGHT = 24
    LEADING_FACTOR = 0.3
    # Approximate glyph advance as a fraction of the font size
    ADVANCE_FACTOR = 0.6

    ANCHORS = {
        "start": "start",
        "justify": "start",
        "center": "middle",
        "end": "end",
    }

    SVG_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 {{ width }} {{ height }}" width="{{ width }}" height="{{ height }}">
  <rect width="{{ width }}" height="{{ height }}" fill="{{ background }}"/>
{% for item in items %}
{% if item.kind == "picture" %}
{% if item.href %}
  <image href="{{ item.href }}" x="{{ item.frame.x|num }}" y="{{ item.frame.y|num }}" width="{{ item.frame.width|num }}" height="{{ item.frame.height|num }}" preserveAspectRatio="xMidYMid meet"{{ rotate(item.frame) }}/>
{% else %}
  <rect x="{{ item.frame.x|num }}" y="{{ item.frame.y|num }}" width="{{ item.frame.width|num }}" height="{{ item.frame.height|num }}" fill="#E2E8F0" stroke="#94A3B8" stroke-width="2" stroke-dasharray="8 4"{{ rotate(item.frame) }}/>
{% endif %}
{% elif item.kind == "shape" %}
  <rect x="{{ item.frame.x|num }}" y="{{ item.frame.y|num }}" width="{{ item.frame.width|num }}" height="{{ item.frame.height|num }}" fill="{{ item.fill or 'none' }}"{{ stroke(item) }}{{ rotate(item.frame) }}/>
{% elif item.kind == "text" %}
  <g>
{% if item.fill or item.stroke %}
    <rect x="{{ item.frame.x|num }}" y="{{ item.frame.y|num }}" width="{{ item.frame.width|num }}" height="{{ item.frame.height|num }}" fill="{{ item.fill or 'none' }}"{{ stroke(item) }}/>
{% endif %}
{% for line in item.lines %}
{% if line.bullet %}
    <text x="{{ (line.x - bullet_offset)|num }}" y="{{ line.y|num }}" font-size="{{ line.font_size|num }}px" fill="{{ line.bullet_color }}" text-anchor="{{ line.anchor }}">{{ line.bullet }}</text>
{% endif %}
    <text x="{{ line.x|num }}" y="{{ line.y|num }}" text-anchor="{{ line.anchor }}">{% for seg in line.segments %}<tspan{% if seg.x is not none %} x="{{ seg.x|num }}"{% endif %} font-family="{{ seg.run.font_family }}{% if seg.run.font_family != "Arial" %}, Arial{% endif %}, sans-serif" font-size="{{ seg.run.font_size_pt|num }}px" font-weight="{{ 'bold' if seg.run.bold else 'normal' }}" font-style="{{ 'italic' if seg.run.italic else 'normal' }}" fill="{{ seg.run.color_hex }}">{{ seg.run.text }}</tspan>{% endfor %}</text>
{% endfor %}
  </g>
{% endif %}
{% endfor %}
</svg>
"""

    PLACEHOLDER_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {{ width }} {{ height }}" width="{{ width }}" height="{{ height }}">
  <rect width="{{ width }}" height="{{ height }}" fill="#1E293B"/>
  <text x="{{ (width / 2)|num }}" y="{{ (height / 2 - 40)|num }}" font-family="Arial, sans-serif" font-size="48" fill="#FFFFFF" text-anchor="middle">Slide {{ slide_number }}</text>
  <text x="{{ (width / 2)|num }}" y="{{ (height / 2 + 40)|num }}" font-family="Arial, sans-serif" font-size="24" fill="#94A3B8" text-anchor="middle">Content could not be rendered</text>
  <text x="{{ (width / 2)|num }}" y="{{ (height - 60)|num }}" font-family="Arial, sans-serif" font-size="20" fill="#64748B" text-anchor="middle">{{ slide_number }} / {{ total_slides }}</text>
</svg>
"""

    def __init__(
        self,
        canvas_width: int = 1920,
        canvas_height: int = 1080,
        embed_media: bool = True,
    ):
        """
        Initialize renderer.

        Args:
            canvas_width: Output canvas width in pixels
            canvas_height: Output canvas height in pixels
            embed_media: Inline picture data; when False pictures become dashed boxes
        """
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.embed_media = embed_media

        env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
        env.filters["num"] = format_number
        env.globals["rotate"] = _rotate_attr
        env.globals["stroke"] = _stroke_attrs
        self._template = env.from_string(self.SVG_TEMPLATE)
        self._placeholder = env.from_string(self.PLACEHOLDER_TEMPLATE)

    def render(self, slide: DecodedSlide) -> str:
        """Render one decoded slide to SVG text."""
        items = [self._prepare(element) for element in slide.elements]
        return self._template.render(
            width=self.canvas_width,
            height=self.canvas_height,
            background=slide.background,
            bullet_offset=self.BULLET_OFFSET,
            items=items,
        )

    def render_placeholder(self, slide_number: int, total_slides: int) -> str:
        """The fixed 'content unavailable' image for a slide that failed."""
        return self._placeholder.render(
            width=self.canvas_width,
            height=self.canvas_height,
            slide_number=slide_number,
            total_slides=total_slides,
        )

    def _prepare(self, element) -> dict:
        if isinstance(element, PictureRef):
            return {
                "kind": "picture",
                "frame": element.frame,
                "href": element.asset.data_url if self.embed_media else None,
            }
        if isinstance(element, ShapeBlock):
            return {
                "kind": "shape",
                "frame": element.frame,
                "fill": element.fill_color,
                "stroke": element.stroke_color,
                "stroke_width": element.stroke_width_pt,
            }
        if isinstance(element, TextBlock):
            return {
                "kind": "text",
                "frame": element.frame,
                "fill": element.fill_color,
                "stroke": element.stroke_color,
                "stroke_width": element.stroke_width_pt,
                "lines": self.layout_text(element),
            }
        raise TypeError(f"Unknown element type: {type(element).__name__}")

    # --- Text layout ---

    def layout_text(self, block: TextBlock) -> List[TextLine]:
        """Lay out paragraphs top to bottom, threading the baseline cursor through each one."""
        lines = []
        cursor = block.frame.y + self.TEXT_PADDING
        for paragraph in block.paragraphs:
            line, cursor = self._layout_paragraph(paragraph, block.frame, cursor)
            if line is not None:
                lines.append(line)
        return lines

    def _layout_paragraph(self, paragraph: Paragraph, frame: Frame, cursor: float):
        anchor = self.ANCHORS[paragraph.alignment]
        if anchor == "middle":
            x = frame.x + frame.width / 2
        elif anchor == "end":
            x = frame.x + frame.width - self.TEXT_PADDING
        else:
            x = frame.x + self.TEXT_PADDING + paragraph.level * self.INDENT_PER_LEVEL

        font_size = max([run.font_size_pt for run in paragraph.runs] + [self.MIN_LINE_HEIGHT])
        baseline = cursor + font_size
        next_cursor = baseline + font_size * self.LEADING_FACTOR

        if not paragraph.runs:
            # A bullet with no text only takes up vertical space
            return None, next_cursor

        segments = []
        run_x = x
        for run in paragraph.runs:
            if anchor == "start":
                segments.append(TextSegment(run=run, x=run_x))
                run_x += len(run.text) * run.font_size_pt * self.ADVANCE_FACTOR
            else:
                # Centered and end-aligned runs flow after each other within one text node
                segments.append(TextSegment(run=run, x=None))

        line = TextLine(
            x=x,
            y=baseline,
            anchor=anchor,
            font_size=font_size,
            bullet=paragraph.bullet,
            bullet_color=paragraph.runs[0].color_hex,
            segments=segments,
        )
        return line, next_cursor


def _rotate_attr(frame: Frame) -> str:
    if not frame.rotation:
        return Markup("")
    return Markup(' transform="rotate({} {} {})"').format(
        format_number(frame.rotation),
        format_number(frame.center_x),
        format_number(frame.center_y),
    )


def _stroke_attrs(item: dict) -> str:
    if not item.get("stroke"):
        return Markup("")
    return Markup(' stroke="{}" stroke-width="{}"').format(item["stroke"], format_number(item["stroke_width"] or 1))
