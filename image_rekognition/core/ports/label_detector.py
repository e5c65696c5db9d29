"""
Label detection port.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models.label import DetectedLabel


class LabelDetectorPort(ABC):
    """
    External label detection capability.
    """

    @abstractmethod
    def detect_labels(self, bucket: str, key: str, max_labels: int,
                      min_confidence: float) -> List[DetectedLabel]:
        """
        Detect labels for an image stored in a bucket.

        Raises:
            ObjectNotFoundError: If the image is gone
            DetectionServiceError: On transient service failures
        """
        pass
