"""
Domain exceptions for the image recognition service.

Exceptions are split by retry semantics: a RetriableError leaves a queued
message for redelivery, a NonRetriableError acknowledges it.
"""
from typing import Optional


class ImageRecognitionError(Exception):
    """Base exception for the image recognition service."""


class NonRetriableError(ImageRecognitionError):
    """Processing failed and redelivery cannot succeed."""


class RetriableError(ImageRecognitionError):
    """Processing failed for a transient reason and may succeed on redelivery."""


class ObjectNotFoundError(NonRetriableError):
    """The referenced storage object does not exist."""

    def __init__(self, bucket: str, key: str):
        super().__init__(f"Object '{key}' not found in bucket '{bucket}'")
        self.bucket = bucket
        self.key = key


class LabelNotFoundError(NonRetriableError):
    """No label record exists for the image identifier."""

    def __init__(self, image_id: str):
        super().__init__(f"No labels found for image '{image_id}'")
        self.image_id = image_id


class InvalidRequestError(NonRetriableError):
    """A Front-End API request is malformed."""


class InvalidEventError(NonRetriableError):
    """An event or queue message cannot be parsed."""


class DetectionServiceError(RetriableError):
    """The label detection service failed transiently."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class StorageError(ImageRecognitionError):
    """Exception raised for storage operation errors."""

    def __init__(self, message: str, operation: Optional[str] = None, key: Optional[str] = None):
        """
        Initialize storage error.

        Args:
            message: Error description
            operation: Storage operation that failed (get, put, delete, list)
            key: Object or item key involved in the operation
        """
        super().__init__(message)
        self.operation = operation
        self.key = key

    def __str__(self):
        parts = [super().__str__()]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.key:
            parts.append(f"Key: {self.key}")
        return " | ".join(parts)


class AuthorizationError(ImageRecognitionError):
    """The caller is not authenticated or not allowed to access the resource."""


class IdentityStateError(ImageRecognitionError):
    """An identity lifecycle transition is not allowed from the current state."""


class InvalidImageError(NonRetriableError):
    """The stored object is not a decodable image."""
