"""
Slide decoding: XML slide parts -> drawable elements on the target canvas.
"""

from slidevector.decoder.geometry import ScaleFactors
from slidevector.decoder.slide_decoder import SlideDecoder

__all__ = ["ScaleFactors", "SlideDecoder"]
