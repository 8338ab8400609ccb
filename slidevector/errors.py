"""
Error taxonomy for SlideVector conversions.

Job-level errors abort a conversion before any slide is processed. Slide and
asset errors are recovered inside the pipeline and never reach the caller.
"""

from typing import Any, Dict, Optional


class SlideVectorError(Exception):
    """Base class for all conversion errors."""

    code = "conversion_failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Structured error body returned to callers."""
        return {
            "error": self.message,
            "code": self.code,
            "images": [],
            "totalSlides": 0,
        }


class UnsupportedInputFormat(SlideVectorError):
    """The input file name does not denote a presentation package."""

    code = "unsupported_format"


class ArchiveUnreadable(SlideVectorError):
    """The input bytes are not a readable ZIP container."""

    code = "archive_unreadable"


class NoSlidesFound(SlideVectorError):
    """The package holds no ppt/slides/slide1.xml part."""

    code = "no_slides"

    def __init__(self, message: str = "No slides found"):
        super().__init__(message)


class SlideDecodeFailure(SlideVectorError):
    """A single slide could not be decoded or rendered."""

    code = "slide_failed"

    def __init__(self, slide_number: int, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Slide {slide_number} could not be rendered{detail}")
        self.slide_number = slide_number
        self.cause = cause


class UnresolvedAsset(SlideVectorError):
    """A picture reference did not lead to a renderable media part."""

    code = "unresolved_asset"
