"""
Test the pull consumer against the in-memory queue with a redrive policy.
"""
from unittest.mock import Mock, patch

import pytest

from image_rekognition.adapters.queues.in_memory_queue import InMemoryMessageQueue
from image_rekognition.core.exceptions import DetectionServiceError
from image_rekognition.infrastructure.handlers.detection_worker import DetectionWorker
from image_rekognition.config.settings import runtime_settings
from image_rekognition.infrastructure.handlers.dependencies import get_container
from image_rekognition.infrastructure.queue_consumer import QueueConsumer, main
from tests.conftest import IMAGE_BUCKET
from tests.utils.mock_helpers import MockHelpers


@pytest.fixture
def dead_letter_queue() -> InMemoryMessageQueue:
    return InMemoryMessageQueue(name="ImageDLQueue")


@pytest.fixture
def queue(dead_letter_queue) -> InMemoryMessageQueue:
    # Zero visibility timeout so a released message can be received again at once
    return InMemoryMessageQueue(visibility_timeout=0, max_receive_count=2, dead_letter_queue=dead_letter_queue)


@pytest.fixture
def consumer(queue, detect_labels_use_case) -> QueueConsumer:
    return QueueConsumer(queue, DetectionWorker(detect_labels_use_case))


@pytest.mark.unit
class TestQueueConsumer:

    def test_processed_message_is_acknowledged(self, consumer, queue, storage, label_repository,
                                               png_bytes, key_a):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        queue.send(MockHelpers.notification_body(IMAGE_BUCKET, key_a))

        stats = consumer.drain()

        assert (stats.received, stats.acknowledged, stats.released) == (1, 1, 0)
        assert len(queue) == 0
        assert len(label_repository.records) == 1

    def test_non_retriable_failure_is_acknowledged(self, consumer, queue, dead_letter_queue, key_a):
        queue.send(MockHelpers.notification_body(IMAGE_BUCKET, key_a))

        stats = consumer.drain()

        assert stats.acknowledged == 1
        assert len(dead_letter_queue) == 0

    def test_persistent_failure_ends_in_dead_letter_queue(self, consumer, queue, dead_letter_queue,
                                                          storage, label_repository, mock_label_detector,
                                                          png_bytes, key_a):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        mock_label_detector.detect_labels.side_effect = DetectionServiceError("Rate exceeded")
        message_id = queue.send(MockHelpers.notification_body(IMAGE_BUCKET, key_a))

        stats = consumer.drain()

        assert stats.received == 2
        assert stats.released == 2
        assert len(queue) == 0
        assert [m.message_id for m in dead_letter_queue.messages()] == [message_id]
        assert label_repository.records == {}

    def test_poll_once_without_messages(self, queue):
        stats = QueueConsumer(queue, Mock()).poll_once()
        assert stats.received == 0


@pytest.mark.unit
class TestConsumerMain:

    @pytest.fixture(autouse=True)
    def wired_container(self, reset_container, detect_labels_use_case):
        get_container()._detect_labels_use_case = detect_labels_use_case

    def test_drains_the_configured_queue(self, queue, storage, label_repository, png_bytes, key_a):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        queue.send(MockHelpers.notification_body(IMAGE_BUCKET, key_a))

        with patch("image_rekognition.infrastructure.queue_consumer.SQSMessageQueue",
                   return_value=queue) as queue_class:
            exit_code = main(["--queue-url", "https://sqs.example/ImageQueue", "--wait-time", "0"])

        assert exit_code == 0
        queue_class.assert_called_once_with("https://sqs.example/ImageQueue", wait_time_seconds=0)
        assert len(label_repository.records) == 1
        assert len(queue) == 0

    def test_released_messages_exit_nonzero(self, queue, storage, mock_label_detector, png_bytes, key_a):
        storage.put_object(IMAGE_BUCKET, key_a, png_bytes, "image/png")
        mock_label_detector.detect_labels.side_effect = DetectionServiceError("Rate exceeded")
        queue.send(MockHelpers.notification_body(IMAGE_BUCKET, key_a))

        with patch("image_rekognition.infrastructure.queue_consumer.SQSMessageQueue", return_value=queue):
            assert main(["--queue-url", "https://sqs.example/ImageQueue"]) == 2

    def test_missing_queue_url_fails(self):
        with patch.object(runtime_settings, "queue_url", None):
            assert main([]) == 1
