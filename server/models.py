"""
Pydantic models for API requests/responses.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class SlideImageResponse(BaseModel):
    """One rendered slide."""
    pageNumber: int = Field(ge=1)
    imageData: str = Field(description="data:image/svg+xml;base64 URL")


class ConvertResponse(BaseModel):
    """Successful conversion."""
    images: List[SlideImageResponse] = Field(default_factory=list)
    totalSlides: int = 0
    message: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "images": [{"pageNumber": 1, "imageData": "data:image/svg+xml;base64,PHN2Zy..."}],
                "totalSlides": 1,
                "message": "Converted 1 slides from PPTX",
            }
        }
    }


class ErrorResponse(BaseModel):
    """Job-level failure; no partial output."""
    error: str
    code: Optional[str] = None
    images: List[SlideImageResponse] = Field(default_factory=list)
    totalSlides: int = 0
