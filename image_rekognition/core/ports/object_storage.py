"""
Object storage port for image and resized-image buckets.
"""
from abc import ABC, abstractmethod
from typing import List


class ObjectStoragePort(ABC):
    """
    Abstract interface for bucket operations used by both compute units.

    Implementations raise ObjectNotFoundError for missing objects and
    StorageError for any other storage failure.
    """

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """
        Read an object.

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        pass

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing object is not an error."""
        pass

    @abstractmethod
    def list_keys(self, bucket: str, prefix: str) -> List[str]:
        """
        List object keys under a prefix.

        Returns:
            Keys in lexicographic order, empty when nothing matches
        """
        pass
