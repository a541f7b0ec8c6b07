"""Pydantic models and data schemas for the meme pipeline.

The pipeline constants live in :class:`MemeConfig`, a frozen model that the
orchestrator owns. Tests can build their own instance with different bounds
instead of patching module globals.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValidationOutcome(str, Enum):
    ACCEPT = "accept"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"


class VerticalAnchor(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class HorizontalAnchor(str, Enum):
    CENTER = "center"


class Dimensions(BaseModel):
    """Width and height of a bitmap, in pixels."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class CaptionSpec(BaseModel):
    """One caption slot: the text plus where it is anchored on the image."""

    model_config = ConfigDict(frozen=True)

    text: str
    vertical_anchor: VerticalAnchor
    horizontal_anchor: HorizontalAnchor = HorizontalAnchor.CENTER

    @property
    def anchor(self) -> str:
        """Pillow text anchor for this caption ("ma" or "md")."""
        return "m" + ("a" if self.vertical_anchor is VerticalAnchor.TOP else "d")


class MemeConfig(BaseModel):
    """Bounds and layout constants for one pipeline invocation.

    Attributes:
        min_width, min_height: Smallest accepted image.
        max_width, max_height: Largest accepted image.
        fit_width, fit_height: Box that larger images are scaled down into.
        offset_x: Horizontal nudge applied to both caption renders.
        offset_y: Distance of the captions from the top and bottom edges.
        shadow_offset: Shift of the white render relative to the black one,
            applied to both axes.
        font_size: Point size of the caption font.
    """

    model_config = ConfigDict(frozen=True)

    min_width: int = Field(default=640, gt=0)
    min_height: int = Field(default=480, gt=0)
    max_width: int = Field(default=6000, gt=0)
    max_height: int = Field(default=6000, gt=0)
    fit_width: int = Field(default=1024, gt=0)
    fit_height: int = Field(default=768, gt=0)

    offset_x: int = 0
    offset_y: int = Field(default=10, ge=0)
    shadow_offset: int = Field(default=3, ge=0)
    font_size: int = Field(default=64, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "MemeConfig":
        if self.min_width > self.max_width or self.min_height > self.max_height:
            raise ValueError("minimum bounds must not exceed maximum bounds")
        # a fit box below the minimum box would scale large images of ordinary
        # aspect ratio under it; extreme ratios (6000x480 -> 1024x82) still go below
        if self.fit_width < self.min_width or self.fit_height < self.min_height:
            raise ValueError("fit box must be at least as large as the minimum bounds")
        return self

    @property
    def too_small_message(self) -> str:
        return f"Image must be at least {self.min_width}x{self.min_height}."

    @property
    def too_large_message(self) -> str:
        return f"Image cannot exceed {self.max_width}x{self.max_height}."


DEFAULT_CONFIG = MemeConfig()


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    """Body returned for 4xx/5xx responses.

    Attributes:
        detail: Human readable description of the failure.
    """

    detail: str
