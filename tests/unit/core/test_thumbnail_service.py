"""
Test thumbnail generation with Pillow.
"""
import io

import pytest
from PIL import Image

from image_rekognition.core.exceptions import InvalidImageError
from image_rekognition.core.services.thumbnail_service import ThumbnailService
from tests.utils.mock_helpers import MockHelpers


@pytest.mark.unit
def test_png_thumbnail_keeps_format_and_aspect_ratio():
    source = MockHelpers.create_image_bytes(width=1024, height=512)
    thumbnail = ThumbnailService(max_size=256).create_thumbnail(source)

    assert (thumbnail.width, thumbnail.height) == (256, 128)
    assert thumbnail.content_type == "image/png"
    with Image.open(io.BytesIO(thumbnail.data)) as image:
        assert image.format == "PNG"
        assert image.size == (256, 128)


@pytest.mark.unit
def test_small_image_is_not_enlarged():
    source = MockHelpers.create_image_bytes(width=40, height=30, image_format="JPEG")
    thumbnail = ThumbnailService(max_size=256).create_thumbnail(source)
    assert (thumbnail.width, thumbnail.height) == (40, 30)
    assert thumbnail.content_type == "image/jpeg"


@pytest.mark.unit
def test_non_preserved_format_with_alpha_becomes_rgb_jpeg():
    source = MockHelpers.create_image_bytes(width=300, height=300, image_format="WEBP", mode="RGBA")
    thumbnail = ThumbnailService(max_size=100).create_thumbnail(source)
    assert thumbnail.content_type == "image/jpeg"
    with Image.open(io.BytesIO(thumbnail.data)) as image:
        assert image.mode == "RGB"


@pytest.mark.unit
def test_undecodable_data_raises_invalid_image():
    with pytest.raises(InvalidImageError):
        ThumbnailService().create_thumbnail(b"definitely not an image")


@pytest.mark.unit
def test_size_must_be_positive():
    with pytest.raises(ValueError):
        ThumbnailService(max_size=0)
