import io

import pytest
from PIL import Image

from uxscan.core.image_processing import ImageValidationError, measure_image, validate_upload

ALLOWED = ["image/png", "image/jpeg", "image/webp"]


def _png(width, height):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


def test_measure_png():
    info = measure_image(_png(321, 123))
    assert (info.width, info.height, info.content_type) == (321, 123, "image/png")


def test_measure_respects_exif_orientation():
    img = Image.new("RGB", (100, 50), "white")
    exif = img.getexif()
    exif[0x0112] = 6  # rotate 90 CW
    buf = io.BytesIO()
    img.save(buf, format="JPEG", exif=exif.tobytes())

    info = measure_image(buf.getvalue(), "phone.jpg")
    assert (info.width, info.height) == (50, 100)
    assert info.content_type == "image/jpeg"


def test_measure_garbage():
    with pytest.raises(ImageValidationError, match="Could not read image"):
        measure_image(b"\x00\x01\x02", "x.png")


@pytest.mark.parametrize(
    "content, content_type, message",
    [
        (None, "image/png", "Missing file"),
        (b"abc", "image/gif", "Unsupported file type"),
        (b"abc", None, "Unsupported file type"),
        (b"x" * 11, "image/png", "File too large"),
        (b"", "image/png", "Empty file"),
    ],
)
def test_validate_upload_errors(content, content_type, message):
    with pytest.raises(ImageValidationError, match=message):
        validate_upload(content, content_type, allowed_types=ALLOWED, max_bytes=10)


def test_validate_upload_accepts_uppercase_type():
    validate_upload(b"abc", "IMAGE/PNG", allowed_types=ALLOWED, max_bytes=10)
