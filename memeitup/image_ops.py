"""Image manipulation utilities.

This module wraps the Pillow operations the meme pipeline is built from:
opening uploaded bytes, checking dimensions, scaling large images down,
drawing the two captions and encoding the result as PNG. The orchestration
lives in :mod:`memeitup.pipeline`; these helpers are kept small so each step
can be tested on its own.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Tuple

from PIL import ExifTags, Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError  # type: ignore[import]

from .errors import DecodeError, EncodingError, FontLoadError, ImageTooLargeError
from .models import (
    DEFAULT_CONFIG,
    CaptionSpec,
    Dimensions,
    MemeConfig,
    ValidationOutcome,
    VerticalAnchor,
)

logger = logging.getLogger(__name__)

BLACK: Tuple[int, int, int, int] = (0, 0, 0, 255)
WHITE: Tuple[int, int, int, int] = (255, 255, 255, 255)

# EXIF orientations that rotate the image by 90 or 270 degrees
_TRANSPOSED_ORIENTATIONS = frozenset({5, 6, 7, 8})


def open_image(data: bytes, config: MemeConfig = DEFAULT_CONFIG) -> Image.Image:
    """Open raw image bytes with Pillow without decoding the pixel data.

    Only the header is parsed here, so the dimensions can be checked before
    paying for a full decode.

    Raises:
        DecodeError: If the bytes are empty or not a recognised image.
        ImageTooLargeError: If Pillow refuses the image as a decompression bomb.
    """
    if not data:
        raise DecodeError("No image data provided.")
    try:
        return Image.open(BytesIO(data))
    except Image.DecompressionBombError as exc:
        raise ImageTooLargeError(config.too_large_message) from exc
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc


def image_dimensions(image: Image.Image) -> Dimensions:
    """Return the dimensions of an opened image as it will be displayed.

    EXIF orientations 5-8 swap width and height once the image is
    transposed, so they are swapped here as well. The orientation is read
    through `Image.getexif`, the same source `ImageOps.exif_transpose` uses,
    which includes the XMP fallback. For PNG this may decode the pixels,
    since an eXIf chunk can follow the image data.

    Raises:
        DecodeError: If reading the metadata hits unreadable data.
    """
    width, height = image.size
    try:
        orientation = image.getexif().get(ExifTags.Base.Orientation, 1)
    except (OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc
    if orientation in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return Dimensions(width=width, height=height)


def load_rgba(image: Image.Image) -> Image.Image:
    """Decode the pixel data of an opened image into an upright RGBA bitmap.

    Raises:
        DecodeError: If the pixel data is truncated or otherwise unreadable.
    """
    try:
        image.load()
        upright = ImageOps.exif_transpose(image)
    except (OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc
    try:
        return upright.convert("RGBA")
    finally:
        if upright is not image:
            upright.close()


def validate_dimensions(dims: Dimensions, config: MemeConfig = DEFAULT_CONFIG) -> ValidationOutcome:
    """Classify image dimensions against the configured bounds.

    The too-small check runs first, so an image that is narrower than the
    minimum but taller than the maximum is reported as too small.
    """
    if dims.width < config.min_width or dims.height < config.min_height:
        return ValidationOutcome.TOO_SMALL
    if dims.width > config.max_width or dims.height > config.max_height:
        return ValidationOutcome.TOO_LARGE
    return ValidationOutcome.ACCEPT


def scale_to_fit(image: Image.Image, fit_width: int = 1024, fit_height: int = 768) -> Image.Image:
    """Scale an image down so it fits inside `fit_width` x `fit_height`.

    Aspect ratio is preserved and at least one side touches the box. Images
    already inside the box are returned untouched; images are never scaled up.

    Args:
        image: Bitmap to scale. It is closed when a scaled copy is produced.
        fit_width: Maximum width of the result.
        fit_height: Maximum height of the result.

    Returns:
        The scaled image, or `image` itself if no scaling was needed.
    """
    width, height = image.size
    if width <= fit_width and height <= fit_height:
        return image
    factor = min(fit_width / width, fit_height / height)
    size = (
        min(fit_width, max(1, round(width * factor))),
        min(fit_height, max(1, round(height * factor))),
    )
    logger.debug("Scaling image from %dx%d to %dx%d", width, height, *size)
    scaled = image.resize(size, Image.Resampling.BILINEAR)
    image.close()
    return scaled


def load_caption_font(size: int) -> ImageFont.FreeTypeFont:
    """Load the caption font at `size` points.

    Captions always use Pillow's bundled scalable face. It needs FreeType;
    without it Pillow can only offer a fixed-size bitmap font, which cannot
    be anchored.

    Raises:
        FontLoadError: If the font cannot be loaded at the requested size.
    """
    try:
        font = ImageFont.load_default(size=size)
    except (OSError, ImportError) as exc:
        raise FontLoadError(f"Unable to load caption font: {exc}") from exc
    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontLoadError("Unable to load caption font: FreeType support is not available")
    return font


def wrap_caption(text: str, font: ImageFont.FreeTypeFont, max_width: float) -> str:
    """Greedily word-wrap `text` so each line fits within `max_width`.

    Existing line breaks are kept. A single word wider than `max_width`
    stays on a line of its own and is allowed to overflow.
    """
    lines = []
    for paragraph in text.splitlines() or [""]:
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        line = words[0]
        for word in words[1:]:
            candidate = f"{line} {word}"
            if font.getlength(candidate) <= max_width:
                line = candidate
            else:
                lines.append(line)
                line = word
        lines.append(line)
    return "\n".join(lines)


def _draw_caption(
    draw: ImageDraw.ImageDraw,
    caption: CaptionSpec,
    font: ImageFont.FreeTypeFont,
    size: Tuple[int, int],
    config: MemeConfig,
) -> None:
    width, height = size
    text = wrap_caption(caption.text, font, width)
    x = width / 2 + config.offset_x
    if caption.vertical_anchor is VerticalAnchor.TOP:
        y = config.offset_y
    else:
        y = height - config.offset_y
    shadow = config.shadow_offset
    draw.text((x, y), text, fill=BLACK, font=font, anchor=caption.anchor, align="center")
    draw.text((x + shadow, y + shadow), text, fill=WHITE, font=font, anchor=caption.anchor, align="center")


def apply_captions(
    image: Image.Image,
    top_text: str,
    bottom_text: str,
    config: MemeConfig = DEFAULT_CONFIG,
) -> None:
    """Draw the top and bottom captions onto `image` in place.

    Each caption is rendered twice: black at the anchor point, then white
    shifted by `config.shadow_offset` on both axes.
    """
    font = load_caption_font(config.font_size)
    draw = ImageDraw.Draw(image)
    captions = (
        CaptionSpec(text=top_text, vertical_anchor=VerticalAnchor.TOP),
        CaptionSpec(text=bottom_text, vertical_anchor=VerticalAnchor.BOTTOM),
    )
    for caption in captions:
        _draw_caption(draw, caption, font, image.size, config)


def encode_png(image: Image.Image) -> bytes:
    """Serialize an image to PNG bytes.

    Raises:
        EncodingError: If the codec cannot write the bitmap.
    """
    buffer = BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingError(f"Unable to encode PNG: {exc}") from exc
    return buffer.getvalue()
