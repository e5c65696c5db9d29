"""
Detection Worker Lambda.

Entry point: image_rekognition.infrastructure.handlers.detection_worker.lambda_handler

Event Flow:
1. The image bucket sends ObjectCreated notifications under private/ to the queue
2. The SQS event source invokes this handler with a batch of messages
3. Each message body is an S3 notification; every referenced image is
   labelled, thumbnailed and stored
4. Messages that failed for a retriable reason are reported back in
   batchItemFailures so only they are redelivered

Direct S3 invocation is still accepted but deprecated: it has no retry and
no dead-letter queue.
"""
from typing import Any, Dict, List, Optional

from image_rekognition.core.exceptions import NonRetriableError
from image_rekognition.core.models.image import ImageObject
from image_rekognition.core.usecases.detect_labels import DetectLabelsUseCase
from image_rekognition.infrastructure.events.s3_event_parser import S3EventParser
from image_rekognition.infrastructure.logging.log_config import get_logger
from .dependencies import get_container

logger = get_logger(__name__)


class DetectionWorker:
    """
    Runs label detection for notification payloads.

    Non-retriable failures (missing object, undecodable image, malformed
    notification) are logged and absorbed so the message is acknowledged.
    Retriable and unexpected errors propagate to the caller.
    """

    def __init__(self, use_case: DetectLabelsUseCase, parser: Optional[S3EventParser] = None):
        self.use_case = use_case
        self.parser = parser or S3EventParser()

    def process_body(self, body: str) -> Dict[str, int]:
        """
        Process one queue message body.

        Returns:
            Counts of processed and rejected images
        """
        try:
            images = self.parser.parse_message_body(body)
        except NonRetriableError as e:
            logger.error("Rejected unparseable notification", extra={
                "extra_fields": {"error": str(e), "error_type": type(e).__name__}
            })
            return {"processed": 0, "rejected": 1}
        return self.process_images(images)

    def process_images(self, images: List[ImageObject]) -> Dict[str, int]:
        counts = {"processed": 0, "rejected": 0}
        for image in images:
            if self.process_image(image):
                counts["processed"] += 1
            else:
                counts["rejected"] += 1
        return counts

    def process_image(self, image: ImageObject) -> bool:
        """
        Returns:
            True if labels were stored, False if the image was rejected
        """
        try:
            record = self.use_case.execute(image)
        except NonRetriableError as e:
            logger.error("Image rejected without retry", extra={
                "extra_fields": {
                    "bucket": image.bucket,
                    "key": image.key,
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            })
            return False

        logger.info("Labels stored", extra={
            "extra_fields": {
                "bucket": image.bucket,
                "key": image.key,
                "image": record.image_id,
                "labels": record.label_names
            }
        })
        return True


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda entry point for the Detection Worker.

    Args:
        event: SQS batch (canonical) or S3 notification (deprecated)
        context: AWS Lambda context object

    Returns:
        Partial batch response for SQS, processing summary for S3
    """
    logger.info("Detection worker invoked", extra={
        "extra_fields": {
            "function_name": getattr(context, "function_name", "unknown"),
            "request_id": getattr(context, "aws_request_id", "unknown"),
            "records": len(event.get("Records") or [])
        }
    })

    worker = DetectionWorker(get_container().get_detect_labels_use_case())

    if worker.parser.is_queue_event(event):
        return handle_queue_batch(worker, event)

    logger.warning("Direct bucket trigger is deprecated; failures are not retried", extra={
        "extra_fields": {"records": len(event.get("Records") or [])}
    })
    return handle_bucket_notification(worker, event)


def handle_queue_batch(worker: DetectionWorker, event: Dict[str, Any]) -> Dict[str, Any]:
    failures = []
    totals = {"processed": 0, "rejected": 0}
    for record in event["Records"]:
        message_id = record.get("messageId")
        try:
            counts = worker.process_body(record.get("body", ""))
        except Exception as e:
            logger.error("Message failed, leaving it for redelivery", extra={
                "extra_fields": {
                    "message_id": message_id,
                    "receive_count": record.get("attributes", {}).get("ApproximateReceiveCount"),
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            })
            failures.append({"itemIdentifier": message_id})
            continue
        totals["processed"] += counts["processed"]
        totals["rejected"] += counts["rejected"]

    logger.info("Queue batch completed", extra={
        "extra_fields": {
            "messages": len(event["Records"]),
            "failed": len(failures),
            "images_processed": totals["processed"],
            "images_rejected": totals["rejected"]
        }
    })
    return {"batchItemFailures": failures}


def handle_bucket_notification(worker: DetectionWorker, event: Dict[str, Any]) -> Dict[str, Any]:
    images = worker.parser.parse_event(event)
    summary = {"processed": 0, "rejected": 0, "failed": 0}
    for image in images:
        try:
            if worker.process_image(image):
                summary["processed"] += 1
            else:
                summary["rejected"] += 1
        except Exception as e:
            logger.error("Image processing failed", extra={
                "extra_fields": {
                    "bucket": image.bucket,
                    "key": image.key,
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            })
            summary["failed"] += 1
    return summary
