"""
Amazon Rekognition implementation of LabelDetectorPort.
"""
from typing import List

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.core.exceptions import (
    DetectionServiceError,
    InvalidImageError,
    ObjectNotFoundError
)
from image_rekognition.core.models.label import DetectedLabel
from image_rekognition.core.ports.label_detector import LabelDetectorPort
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from ..aws_errors import error_code, error_message, is_not_found

INVALID_IMAGE_CODES = {"InvalidImageFormatException", "ImageTooLargeException"}


class RekognitionLabelDetector(LabelDetectorPort):
    """
    Calls rekognition:DetectLabels on the S3 object in place.
    """

    def __init__(self, rekognition_client=None):
        self._client = rekognition_client

    @property
    def client(self):
        if self._client is None:
            self._client = aws_config.rekognition_client
        return self._client

    @log_infrastructure_operation("detect_labels", **op_config())
    def detect_labels(self, bucket: str, key: str, max_labels: int,
                      min_confidence: float) -> List[DetectedLabel]:
        try:
            response = self.client.detect_labels(
                Image={'S3Object': {'Bucket': bucket, 'Name': key}},
                MaxLabels=max_labels,
                MinConfidence=min_confidence
            )
        except ClientError as e:
            code = error_code(e)
            if is_not_found(e):
                raise ObjectNotFoundError(bucket, key) from e
            if code in INVALID_IMAGE_CODES:
                raise InvalidImageError(error_message(e)) from e
            # Persistent failures reach the dead-letter queue after the retry bound
            raise DetectionServiceError(
                f"DetectLabels failed: {error_message(e)}", error_code=code
            ) from e

        labels = []
        for label in response.get('Labels', []) or []:
            name = label.get('Name')
            confidence = label.get('Confidence')
            if name is None or confidence is None:
                continue
            labels.append(DetectedLabel(name=str(name), confidence=float(confidence)))
        return labels
