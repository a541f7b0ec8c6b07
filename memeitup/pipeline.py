"""Meme pipeline orchestration.

`meme_it_up` runs decode -> validate -> scale -> caption -> encode in that
order and stops at the first failure. Nothing is retried and no state is
shared between calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import image_ops
from .errors import ImageTooLargeError, ImageTooSmallError
from .models import DEFAULT_CONFIG, Dimensions, MemeConfig, ValidationOutcome

logger = logging.getLogger(__name__)


def meme_it_up(
    image_bytes: bytes,
    top_text: str,
    bottom_text: str,
    config: Optional[MemeConfig] = None,
) -> bytes:
    """Create a meme from an image and two captions.

    Args:
        image_bytes: Raw bytes of the uploaded image, in any format Pillow reads.
        top_text: Caption drawn along the top edge.
        bottom_text: Caption drawn along the bottom edge.
        config: Bounds and layout constants; defaults to `DEFAULT_CONFIG`.

    Returns:
        The finished image encoded as PNG.

    Raises:
        ImageTooSmallError: If the image is below the minimum bounds.
        ImageTooLargeError: If the image exceeds the maximum bounds.
        DecodeError: If the bytes are not a readable image.
        FontLoadError: If the caption font cannot be loaded.
        EncodingError: If the PNG codec fails.
    """
    config = config or DEFAULT_CONFIG

    with image_ops.open_image(image_bytes, config) as source:
        dims = image_ops.image_dimensions(source)
        logger.debug("Decoded %s image %s", source.format, dims)
        _check_bounds(dims, config)
        image = image_ops.load_rgba(source)

    try:
        # the upright bitmap is what gets captioned; it must satisfy the bounds too
        _check_bounds(Dimensions(width=image.width, height=image.height), config)
        image = image_ops.scale_to_fit(image, config.fit_width, config.fit_height)
        image_ops.apply_captions(image, top_text, bottom_text, config)
        data = image_ops.encode_png(image)
        logger.info("Rendered %dx%d meme (%d bytes)", image.width, image.height, len(data))
        return data
    finally:
        image.close()


def _check_bounds(dims: Dimensions, config: MemeConfig) -> None:
    outcome = image_ops.validate_dimensions(dims, config)
    if outcome is ValidationOutcome.TOO_SMALL:
        raise ImageTooSmallError(config.too_small_message)
    if outcome is ValidationOutcome.TOO_LARGE:
        raise ImageTooLargeError(config.too_large_message)
