import pytest
from pydantic import ValidationError

from memeitup.errors import FailureKind
from memeitup.models import DEFAULT_CONFIG, CaptionSpec, Dimensions, MemeConfig, VerticalAnchor


def test_default_config_matches_bounds():
    assert (DEFAULT_CONFIG.min_width, DEFAULT_CONFIG.min_height) == (640, 480)
    assert (DEFAULT_CONFIG.max_width, DEFAULT_CONFIG.max_height) == (6000, 6000)
    assert (DEFAULT_CONFIG.fit_width, DEFAULT_CONFIG.fit_height) == (1024, 768)
    assert DEFAULT_CONFIG.shadow_offset == 3
    assert DEFAULT_CONFIG.too_small_message == "Image must be at least 640x480."
    assert DEFAULT_CONFIG.too_large_message == "Image cannot exceed 6000x6000."


def test_config_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.min_width = 1


def test_config_rejects_inverted_bounds():
    with pytest.raises(ValidationError):
        MemeConfig(min_width=7000)


def test_config_rejects_fit_box_below_minimum():
    with pytest.raises(ValidationError):
        MemeConfig(fit_width=320, fit_height=240)


def test_caption_anchor():
    assert CaptionSpec(text="top", vertical_anchor=VerticalAnchor.TOP).anchor == "ma"
    assert CaptionSpec(text="bottom", vertical_anchor=VerticalAnchor.BOTTOM).anchor == "md"


def test_dimensions_must_be_positive():
    with pytest.raises(ValidationError):
        Dimensions(width=0, height=10)
    assert str(Dimensions(width=640, height=480)) == "640x480"


def test_failure_kind_classification():
    client_kinds = {kind for kind in FailureKind if kind.is_client_error}
    assert client_kinds == {
        FailureKind.MISSING_FIELD,
        FailureKind.IMAGE_TOO_SMALL,
        FailureKind.IMAGE_TOO_LARGE,
    }
