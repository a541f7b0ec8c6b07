import io

import pytest
from PIL import Image


@pytest.fixture
def make_image_bytes():
    """Return a factory that renders a solid image and encodes it in memory."""

    def _make(size, color="white", fmt="PNG", mode="RGB", **save_kwargs):
        img = Image.new(mode, size, color=color)
        buf = io.BytesIO()
        img.save(buf, format=fmt, **save_kwargs)
        return buf.getvalue()

    return _make
