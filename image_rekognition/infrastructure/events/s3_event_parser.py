"""
Parses S3 object-created notifications, either delivered directly to the
Lambda or wrapped in SQS message bodies.
"""
import json
from typing import Any, Dict, List
from urllib.parse import unquote_plus

from image_rekognition.core.exceptions import InvalidEventError
from image_rekognition.core.models.image import ImageObject
from image_rekognition.infrastructure.logging.log_config import get_logger

logger = get_logger(__name__)

S3_EVENT_SOURCE = "aws:s3"
SQS_EVENT_SOURCE = "aws:sqs"
TEST_EVENT = "s3:TestEvent"
OBJECT_CREATED_PREFIX = "ObjectCreated:"


class S3EventParser:
    """
    Turns notification payloads into ImageObject references.

    Records that are not object-created notifications are skipped rather
    than rejected; S3 sends a test event when a notification is configured.
    """

    def is_queue_event(self, event: Dict[str, Any]) -> bool:
        records = event.get("Records") or []
        return bool(records) and all(
            record.get("eventSource") == SQS_EVENT_SOURCE for record in records
        )

    def parse_event(self, event: Dict[str, Any]) -> List[ImageObject]:
        """
        Extract image references from an S3 notification document.

        Raises:
            InvalidEventError: If a record is missing its bucket or key
        """
        if not isinstance(event, dict):
            raise InvalidEventError(f"Expected a notification object, got {type(event).__name__}")

        if event.get("Event") == TEST_EVENT:
            logger.info("Skipping S3 test event")
            return []

        images = []
        for record in event.get("Records") or []:
            if record.get("eventSource") != S3_EVENT_SOURCE:
                logger.debug("Skipping non-S3 record", extra={
                    "extra_fields": {"event_source": record.get("eventSource")}
                })
                continue
            if not record.get("eventName", "").startswith(OBJECT_CREATED_PREFIX):
                logger.debug("Skipping non object-created record", extra={
                    "extra_fields": {"event_name": record.get("eventName")}
                })
                continue
            images.append(self._parse_record(record))
        return images

    def parse_message_body(self, body: str) -> List[ImageObject]:
        """
        Raises:
            InvalidEventError: If the body is not a JSON S3 notification
        """
        try:
            payload = json.loads(body)
        except (TypeError, ValueError) as e:
            raise InvalidEventError(f"Message body is not valid JSON: {e}") from e
        return self.parse_event(payload)

    @staticmethod
    def _parse_record(record: Dict[str, Any]) -> ImageObject:
        s3 = record.get("s3") or {}
        bucket = (s3.get("bucket") or {}).get("name")
        obj = s3.get("object") or {}
        raw_key = obj.get("key")
        if not bucket or not raw_key:
            raise InvalidEventError("S3 record is missing bucket name or object key")

        # Keys arrive URL-encoded, spaces as '+'
        return ImageObject(
            bucket=bucket,
            key=unquote_plus(raw_key),
            size=int(obj.get("size", 0) or 0),
            etag=obj.get("eTag", "") or "",
        )
