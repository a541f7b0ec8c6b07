"""Meme generation package.

This package turns an uploaded image and two captions into a PNG meme.
See :mod:`memeitup.pipeline` for the entry point and
:mod:`memeitup.image_ops` for the individual Pillow steps.
"""

from .errors import FailureKind, MemeError
from .models import DEFAULT_CONFIG, MemeConfig
from .pipeline import meme_it_up

__all__ = ["DEFAULT_CONFIG", "FailureKind", "MemeConfig", "MemeError", "meme_it_up"]
