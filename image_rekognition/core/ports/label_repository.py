"""
Label store port.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..models.label import LabelRecord


class LabelRepositoryPort(ABC):
    """
    Keyed store of label records.
    Writes are last-write-wins by image identifier.
    """

    @abstractmethod
    def save(self, record: LabelRecord) -> LabelRecord:
        """Create or overwrite the record for record.image_id."""
        pass

    @abstractmethod
    def get(self, image_id: str) -> Optional[LabelRecord]:
        pass

    @abstractmethod
    def delete(self, image_id: str) -> bool:
        """
        Returns:
            True if a record was deleted, False if none existed
        """
        pass
