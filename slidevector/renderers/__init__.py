"""
Slide renderers.

SVG output through jinja2 templates.
"""

from slidevector.renderers.svg_renderer import SVGRenderer

__all__ = ["SVGRenderer"]
