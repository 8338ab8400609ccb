"""
FastAPI backend server for SlideVector.

Provides REST endpoints for:
- PPTX upload and conversion to SVG slide images
- Health check
"""

__version__ = "0.1.0"
