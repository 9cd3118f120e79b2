import pytest

from utils.media_validation import is_image_mime, parse_data_url, strip_data_url, to_data_url


@pytest.mark.parametrize("mime, expected", [
    ("image/png", True),
    ("IMAGE/JPEG", True),
    ("image/webp; charset=binary", True),
    ("text/plain", False),
    ("application/pdf", False),
    ("", False),
    (None, False),
])
def test_is_image_mime(mime, expected):
    assert is_image_mime(mime) is expected


def test_strip_data_url_splits_at_first_comma():
    assert strip_data_url("data:image/png;base64,QUJD") == "QUJD"
    assert strip_data_url("QUJD") == "QUJD"
    with pytest.raises(ValueError):
        strip_data_url("data:image/png;base64,")


def test_parse_data_url():
    assert parse_data_url(to_data_url("QUJD", "image/webp")) == ("image/webp", "QUJD")


@pytest.mark.parametrize("value", [
    "",
    "QUJD",
    "data:image/png,QUJD",
    "data:image/png;base64,",
])
def test_parse_data_url_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_data_url(value)
