"""
Test the Detection Worker use case with in-memory ports.
"""
import pytest

from image_rekognition.core.exceptions import (
    DetectionServiceError,
    InvalidEventError,
    InvalidImageError,
    ObjectNotFoundError,
)
from image_rekognition.core.models.image import ImageObject
from image_rekognition.core.models.label import DetectedLabel
from tests.conftest import IMAGE_BUCKET, RESIZED_BUCKET


@pytest.mark.unit
def test_processed_image_has_exactly_one_label_record(detect_labels_use_case, storage,
                                                       label_repository, png_bytes, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")

    record = detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    image_id = key_a[len("private/"):]
    assert record.image_id == image_id
    assert list(label_repository.records) == [image_id]
    assert label_repository.records[image_id].label_names == ["Cat", "Animal", "Pet"]
    assert record.source_key == key_a


@pytest.mark.unit
def test_thumbnail_written_to_resized_bucket_under_source_key(detect_labels_use_case, storage,
                                                               png_bytes, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")

    record = detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    assert record.resized_key == key_a
    data, content_type = storage.objects[(RESIZED_BUCKET, key_a)]
    assert content_type == "image/png"
    assert len(data) > 0


@pytest.mark.unit
def test_reprocessing_overwrites_label_record(detect_labels_use_case, storage, label_repository,
                                              mock_label_detector, png_bytes, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
    detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    mock_label_detector.detect_labels.return_value = [DetectedLabel("Dog", 88.0)]
    detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    assert len(label_repository.records) == 1
    assert label_repository.get(key_a[len("private/"):]).label_names == ["Dog"]


@pytest.mark.unit
def test_detection_uses_configured_bounds(detect_labels_use_case, storage, mock_label_detector,
                                          png_bytes, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
    detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))
    mock_label_detector.detect_labels.assert_called_once_with(IMAGE_BUCKET, key_a, 10, 70.0)


@pytest.mark.unit
def test_deleted_image_is_not_found_and_writes_nothing(detect_labels_use_case, storage,
                                                        label_repository, mock_label_detector, key_a):
    with pytest.raises(ObjectNotFoundError):
        detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    mock_label_detector.detect_labels.assert_not_called()
    assert label_repository.records == {}
    assert storage.objects == {}


@pytest.mark.unit
def test_detection_failure_leaves_no_side_effects(detect_labels_use_case, storage, label_repository,
                                                  mock_label_detector, png_bytes, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
    mock_label_detector.detect_labels.side_effect = DetectionServiceError("throttled", "ThrottlingException")

    with pytest.raises(DetectionServiceError):
        detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))

    assert label_repository.records == {}
    assert not storage.exists(RESIZED_BUCKET, key_a)


@pytest.mark.unit
def test_key_outside_upload_prefix_is_invalid_event(detect_labels_use_case):
    with pytest.raises(InvalidEventError):
        detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key="public/cat.png"))


@pytest.mark.unit
def test_corrupt_image_is_rejected(detect_labels_use_case, storage, label_repository, key_a):
    storage.put_object(IMAGE_BUCKET, key_a, b"not an image", "image/png")
    with pytest.raises(InvalidImageError):
        detect_labels_use_case.execute(ImageObject(bucket=IMAGE_BUCKET, key=key_a))
    assert label_repository.records == {}
