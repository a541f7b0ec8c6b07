"""Failure types raised by the meme pipeline.

Every error carries a :class:`FailureKind` so that the HTTP layer can decide
between a client error (400) and a server error (500) by looking at the
kind, not at which exception instance was raised.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    MISSING_FIELD = "missing_field"
    IMAGE_TOO_SMALL = "image_too_small"
    IMAGE_TOO_LARGE = "image_too_large"
    DECODE = "decode"
    ENCODING = "encoding"
    FONT_LOAD = "font_load"

    @property
    def is_client_error(self) -> bool:
        return self in _CLIENT_KINDS


_CLIENT_KINDS = frozenset(
    {FailureKind.MISSING_FIELD, FailureKind.IMAGE_TOO_SMALL, FailureKind.IMAGE_TOO_LARGE}
)


class MemeError(Exception):
    """Base class for all pipeline failures."""

    kind: FailureKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingFieldError(MemeError):
    kind = FailureKind.MISSING_FIELD


class ImageBoundsError(MemeError):
    """The decoded image falls outside the accepted dimensions."""


class ImageTooSmallError(ImageBoundsError):
    kind = FailureKind.IMAGE_TOO_SMALL


class ImageTooLargeError(ImageBoundsError):
    kind = FailureKind.IMAGE_TOO_LARGE


class DecodeError(MemeError):
    kind = FailureKind.DECODE


class EncodingError(MemeError):
    kind = FailureKind.ENCODING


class FontLoadError(MemeError):
    kind = FailureKind.FONT_LOAD
