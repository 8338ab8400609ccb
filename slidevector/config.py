"""
Conversion settings.

Defaults match the host application's slide canvas. Every field can be
overridden through SLIDEVECTOR_* environment variables (a .env file is
loaded by the CLI and the server before settings are built).
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


class ConversionSettings(BaseModel):
    """Settings for a conversion job."""

    canvas_width: int = Field(default=1920, gt=0, description="Output canvas width in px")
    canvas_height: int = Field(default=1080, gt=0, description="Output canvas height in px")
    max_workers: int = Field(default=1, ge=1, description="Slides decoded in parallel")
    embed_media: bool = Field(default=True, description="Inline picture bytes as data URLs")
    verbose: bool = Field(default=True, description="Print pipeline progress")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "canvas_width": 1920,
                "canvas_height": 1080,
                "max_workers": 4,
                "embed_media": True,
                "verbose": False,
            }
        },
    }

    @classmethod
    def from_env(cls, **overrides: Optional[object]) -> "ConversionSettings":
        """Build settings from SLIDEVECTOR_* variables, then apply non-None overrides."""
        values = {
            "canvas_width": _env_int("SLIDEVECTOR_CANVAS_WIDTH", 1920),
            "canvas_height": _env_int("SLIDEVECTOR_CANVAS_HEIGHT", 1080),
            "max_workers": _env_int("SLIDEVECTOR_MAX_WORKERS", 1),
            "embed_media": _env_bool("SLIDEVECTOR_EMBED_MEDIA", True),
            "verbose": _env_bool("SLIDEVECTOR_VERBOSE", True),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
