"""
Test storage key, image identifier and ownership derivation.
"""
import pytest

from image_rekognition.core.models.image import (
    ImageObject,
    ResizedObject,
    image_id_from_key,
    owner_of,
    owner_prefix,
    resized_key_for,
)


@pytest.mark.unit
def test_image_id_strips_upload_prefix():
    assert image_id_from_key("private/sub-1/photos/cat.jpg") == "sub-1/photos/cat.jpg"


@pytest.mark.unit
@pytest.mark.parametrize("key", ["", "public/cat.jpg", "private/", "cat.jpg"])
def test_image_id_rejects_keys_outside_prefix(key):
    with pytest.raises(ValueError):
        image_id_from_key(key)


@pytest.mark.unit
def test_image_id_honours_custom_prefix():
    assert image_id_from_key("uploads/a/b.png", upload_prefix="uploads/") == "a/b.png"


@pytest.mark.unit
def test_resized_key_equals_source_key():
    source = ImageObject(bucket="images", key="private/sub-1/cat.jpg")
    resized = ResizedObject.for_source(source, bucket="resized", width=10, height=5)
    assert resized_key_for(source.key) == source.key
    assert resized.key == source.key
    assert resized.bucket == "resized"


@pytest.mark.unit
@pytest.mark.parametrize("key,expected", [
    ("private/sub-1/cat.jpg", "sub-1"),
    ("private/sub-1/", "sub-1"),
    ("private/us-east-1:abc/nested/cat.jpg", "us-east-1:abc"),
    ("private/sub-1", None),
    ("private/cat.jpg", None),
    ("public/sub-1/cat.jpg", None),
    ("", None),
])
def test_owner_of(key, expected):
    assert owner_of(key) == expected


@pytest.mark.unit
def test_owner_prefix():
    assert owner_prefix("sub-1") == "private/sub-1/"
    with pytest.raises(ValueError):
        owner_prefix("a/b")
    with pytest.raises(ValueError):
        owner_prefix("")
