"""
In-memory port implementations for use case and handler tests.
"""
from typing import Dict, List, Optional, Tuple

from image_rekognition.core.exceptions import AuthorizationError, ObjectNotFoundError
from image_rekognition.core.models.label import LabelRecord
from image_rekognition.core.ports.label_repository import LabelRepositoryPort
from image_rekognition.core.ports.object_storage import ObjectStoragePort
from image_rekognition.core.ports.token_verifier import TokenVerifierPort


class InMemoryObjectStorage(ObjectStoragePort):

    def __init__(self):
        self.objects: Dict[Tuple[str, str], Tuple[bytes, str]] = {}

    def get_object(self, bucket: str, key: str) -> bytes:
        if (bucket, key) not in self.objects:
            raise ObjectNotFoundError(bucket, key)
        return self.objects[(bucket, key)][0]

    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        self.objects[(bucket, key)] = (data, content_type)

    def delete_object(self, bucket: str, key: str) -> None:
        self.objects.pop((bucket, key), None)

    def list_keys(self, bucket: str, prefix: str) -> List[str]:
        return sorted(key for b, key in self.objects if b == bucket and key.startswith(prefix))

    def exists(self, bucket: str, key: str) -> bool:
        return (bucket, key) in self.objects


class InMemoryLabelRepository(LabelRepositoryPort):

    def __init__(self):
        self.records: Dict[str, LabelRecord] = {}

    def save(self, record: LabelRecord) -> LabelRecord:
        self.records[record.image_id] = record
        return record

    def get(self, image_id: str) -> Optional[LabelRecord]:
        return self.records.get(image_id)

    def delete(self, image_id: str) -> bool:
        return self.records.pop(image_id, None) is not None


class StaticTokenVerifier(TokenVerifierPort):
    """Maps known bearer tokens to subjects."""

    def __init__(self, subjects: Dict[str, str]):
        self.subjects = subjects

    def verify(self, token: str) -> str:
        token = (token or "").replace("Bearer ", "").strip()
        if token not in self.subjects:
            raise AuthorizationError("Invalid token")
        return self.subjects[token]
