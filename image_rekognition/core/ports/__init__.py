"""
Ports (interfaces) between the domain and AWS adapters.
"""
from .object_storage import ObjectStoragePort
from .label_repository import LabelRepositoryPort
from .label_detector import LabelDetectorPort
from .message_queue import MessageQueuePort
from .token_verifier import TokenVerifierPort
from .identity_provider import IdentityProviderPort

__all__ = [
    "ObjectStoragePort",
    "LabelRepositoryPort",
    "LabelDetectorPort",
    "MessageQueuePort",
    "TokenVerifierPort",
    "IdentityProviderPort",
]
