"""
Test the Detection Worker Lambda handler and its retry semantics.
"""
import json
from unittest.mock import patch

import pytest

from image_rekognition.core.exceptions import DetectionServiceError
from image_rekognition.infrastructure.handlers.dependencies import get_container
from image_rekognition.infrastructure.handlers.detection_worker import lambda_handler
from tests.conftest import IMAGE_BUCKET, RESIZED_BUCKET
from tests.utils.mock_helpers import MockHelpers


@pytest.fixture
def container(storage, label_repository, mock_label_detector):
    container = get_container()
    container._storage = storage
    container._label_repository = label_repository
    container._label_detector = mock_label_detector
    return container


@pytest.fixture
def context():
    return MockHelpers.create_mock_lambda_context()


@pytest.mark.unit
class TestQueueBatch:

    def test_successful_batch_reports_no_failures(self, container, storage, label_repository,
                                                  png_bytes, key_a, context):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        event = MockHelpers.create_sqs_event([("m-1", MockHelpers.notification_body(IMAGE_BUCKET, key_a))])

        assert lambda_handler(event, context) == {"batchItemFailures": []}
        assert list(label_repository.records) == [key_a[len("private/"):]]
        assert storage.exists(RESIZED_BUCKET, key_a)

    def test_deleted_image_is_acknowledged(self, container, label_repository, key_a, context):
        event = MockHelpers.create_sqs_event([("m-1", MockHelpers.notification_body(IMAGE_BUCKET, key_a))])

        assert lambda_handler(event, context) == {"batchItemFailures": []}
        assert label_repository.records == {}

    def test_malformed_body_is_acknowledged(self, container, context):
        event = MockHelpers.create_sqs_event([("m-1", "not json")])
        assert lambda_handler(event, context) == {"batchItemFailures": []}

    def test_only_retriable_failures_are_reported(self, container, storage, mock_label_detector,
                                                  png_bytes, key_a, key_b, context):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        storage.put_object(IMAGE_BUCKET, key_b, png_bytes, "image/png")

        def detect(bucket, key, max_labels, min_confidence):
            if key == key_b:
                raise DetectionServiceError("Rate exceeded", "ThrottlingException")
            return MockHelpers.create_mock_label_detector().detect_labels.return_value

        mock_label_detector.detect_labels.side_effect = detect
        event = MockHelpers.create_sqs_event([
            ("m-1", MockHelpers.notification_body(IMAGE_BUCKET, key_a)),
            ("m-2", MockHelpers.notification_body(IMAGE_BUCKET, key_b)),
            ("m-3", "not json"),
        ])

        assert lambda_handler(event, context) == {"batchItemFailures": [{"itemIdentifier": "m-2"}]}

    def test_unexpected_errors_are_retried(self, container, storage, mock_label_detector,
                                           png_bytes, key_a, context):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        mock_label_detector.detect_labels.side_effect = RuntimeError("boom")
        event = MockHelpers.create_sqs_event([("m-1", MockHelpers.notification_body(IMAGE_BUCKET, key_a))])

        assert lambda_handler(event, context) == {"batchItemFailures": [{"itemIdentifier": "m-1"}]}


@pytest.mark.unit
class TestDirectBucketTrigger:

    def test_notification_is_processed(self, container, storage, label_repository,
                                       png_bytes, key_a, key_b, context):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        event = MockHelpers.create_s3_notification(IMAGE_BUCKET, [key_a, key_b])

        summary = lambda_handler(event, context)

        assert summary == {"processed": 1, "rejected": 1, "failed": 0}
        assert key_a[len("private/"):] in label_repository.records

    def test_retriable_failure_is_counted(self, container, storage, mock_label_detector,
                                          png_bytes, key_a, context):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        mock_label_detector.detect_labels.side_effect = DetectionServiceError("Rate exceeded")

        summary = lambda_handler(MockHelpers.create_s3_notification(IMAGE_BUCKET, [key_a]), context)

        assert summary["failed"] == 1


@pytest.mark.unit
def test_body_with_several_records_processes_each(container, storage, label_repository,
                                                  png_bytes, key_a, key_b, context):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
    storage.put_object(IMAGE_BUCKET, key_b, png_bytes, "image/png")
    body = json.dumps(MockHelpers.create_s3_notification(IMAGE_BUCKET, [key_a, key_b]))

    lambda_handler(MockHelpers.create_sqs_event([("m-1", body)]), context)

    assert len(label_repository.records) == 2


@pytest.mark.unit
def test_queue_batch_logs_processed_and_rejected_counts(container, storage, png_bytes, key_a, key_b, context):
    storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
    event = MockHelpers.create_sqs_event([
        ("m-1", MockHelpers.notification_body(IMAGE_BUCKET, key_a)),
        ("m-2", MockHelpers.notification_body(IMAGE_BUCKET, key_b)),
        ("m-3", "not json"),
    ])

    with patch("image_rekognition.infrastructure.handlers.detection_worker.logger") as mock_logger:
        lambda_handler(event, context)

    completed = [c for c in mock_logger.info.call_args_list if c.args[0] == "Queue batch completed"]
    assert completed[0].kwargs["extra"]["extra_fields"] == {
        "messages": 3, "failed": 0, "images_processed": 1, "images_rejected": 2
    }
