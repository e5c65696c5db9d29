"""
Pull-based queue consumer.

Drains a MessageQueuePort with the Detection Worker outside Lambda, for
local runs against the in-memory queue or a real SQS queue.

Usage:
    python -m image_rekognition.infrastructure.queue_consumer [--queue-url URL] [--max-batches N]

Exits 0 when every received message was acknowledged, 2 when some were
released for redelivery and 1 when the consumer could not start.
"""
import argparse
import sys
from dataclasses import dataclass
from typing import Optional

from image_rekognition.adapters.queues.sqs_message_queue import SQSMessageQueue
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.exceptions import StorageError
from image_rekognition.core.models.queue import QueueMessage
from image_rekognition.core.ports.message_queue import MessageQueuePort
from image_rekognition.infrastructure.handlers.dependencies import get_container
from image_rekognition.infrastructure.handlers.detection_worker import DetectionWorker
from image_rekognition.infrastructure.logging.log_config import get_logger

logger = get_logger(__name__)


@dataclass
class ConsumerStats:
    received: int = 0
    acknowledged: int = 0
    released: int = 0


class QueueConsumer:
    """
    Acknowledges a message when it was processed or can never succeed, and
    releases it for redelivery when processing failed for a retriable or
    unexpected reason. The queue's redrive policy bounds the retries.
    """

    def __init__(self, queue: MessageQueuePort, worker: DetectionWorker, batch_size: int = 10):
        self.queue = queue
        self.worker = worker
        self.batch_size = batch_size

    def handle_message(self, message: QueueMessage) -> bool:
        """
        Returns:
            True if the message was acknowledged, False if released
        """
        try:
            self.worker.process_body(message.body)
        except Exception as e:
            logger.warning("Releasing message for redelivery", extra={
                "extra_fields": {
                    "message_id": message.message_id,
                    "receive_count": message.receive_count,
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            })
            self.queue.release(message)
            return False

        self.queue.acknowledge(message)
        return True

    def poll_once(self, stats: Optional[ConsumerStats] = None) -> ConsumerStats:
        """Receive and handle a single batch."""
        stats = stats or ConsumerStats()
        for message in self.queue.receive(self.batch_size):
            stats.received += 1
            if self.handle_message(message):
                stats.acknowledged += 1
            else:
                stats.released += 1
        return stats

    def drain(self, max_batches: int = 100) -> ConsumerStats:
        """
        Poll until the queue returns an empty batch.

        Args:
            max_batches: Upper bound on receive calls, for queues without a
                redrive policy where a failing message would loop forever
        """
        stats = ConsumerStats()
        for _ in range(max_batches):
            before = stats.received
            self.poll_once(stats)
            if stats.received == before:
                break
        logger.info("Queue drained", extra={
            "extra_fields": {
                "received": stats.received,
                "acknowledged": stats.acknowledged,
                "released": stats.released
            }
        })
        return stats


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Drain the image queue with the Detection Worker")
    parser.add_argument("--queue-url", default=runtime_settings.queue_url,
                        help="SQS queue URL, defaults to QUEUE_URL")
    parser.add_argument("--batch-size", type=int, default=10)
    parser.add_argument("--max-batches", type=int, default=100)
    parser.add_argument("--wait-time", type=int, default=20, help="Long-poll seconds per receive")
    args = parser.parse_args(argv)

    try:
        queue = SQSMessageQueue(args.queue_url, wait_time_seconds=args.wait_time)
        worker = DetectionWorker(get_container().get_detect_labels_use_case())
        stats = QueueConsumer(queue, worker, batch_size=args.batch_size).drain(args.max_batches)
    except (ValueError, StorageError) as e:
        logger.error("Queue consumer failed", extra={"extra_fields": {"error": str(e)}})
        return 1

    return 0 if stats.released == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
