"""
Domain models for the image recognition service.
"""
from .image import (
    ImageObject,
    ResizedObject,
    image_id_from_key,
    resized_key_for,
    owner_of,
    owner_prefix,
)
from .label import DetectedLabel, LabelRecord
from .queue import MessageState, QueueMessage
from .identity import Identity, IdentityStatus

__all__ = [
    "ImageObject",
    "ResizedObject",
    "image_id_from_key",
    "resized_key_for",
    "owner_of",
    "owner_prefix",
    "DetectedLabel",
    "LabelRecord",
    "MessageState",
    "QueueMessage",
    "Identity",
    "IdentityStatus",
]
