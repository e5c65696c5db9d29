"""
Image management use case for the Front-End API.
Lists a user's images, returns labels and deletes an image with its
derived data.
"""
from typing import Optional, List, Dict, Any

from ..exceptions import InvalidRequestError, LabelNotFoundError
from ..models.image import image_id_from_key, resized_key_for
from ..models.label import LabelRecord
from ..ports.label_repository import LabelRepositoryPort
from ..ports.object_storage import ObjectStoragePort
from ..services.access_policy import AccessPolicy


class ImageManagementUseCase:
    """
    Read and delete operations over stored images and their labels.

    When an access policy is configured every operation is authorized
    against the caller's subject before storage is touched.
    """

    def __init__(
        self,
        storage: ObjectStoragePort,
        label_repository: LabelRepositoryPort,
        image_bucket: str,
        resized_bucket: str,
        upload_prefix: str = "private/",
        access_policy: Optional[AccessPolicy] = None
    ):
        self.storage = storage
        self.label_repository = label_repository
        self.image_bucket = image_bucket
        self.resized_bucket = resized_bucket
        self.upload_prefix = upload_prefix
        self.access_policy = access_policy

    def list_images(self, prefix: str, subject_id: Optional[str] = None) -> List[str]:
        """
        List image keys under a prefix.
        An empty listing is a normal result.
        """
        self._require_key(prefix)
        self._authorize(subject_id, prefix, "list")
        return self.storage.list_keys(self.image_bucket, prefix)

    def get_labels(self, key: str, subject_id: Optional[str] = None) -> LabelRecord:
        """
        Raises:
            LabelNotFoundError: If no labels exist for the image
        """
        image_id = self._image_id(key)
        self._authorize(subject_id, key, "read")
        record = self.label_repository.get(image_id)
        if record is None:
            raise LabelNotFoundError(image_id)
        return record

    def delete_image(self, key: str, subject_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Delete the label record, the image and its resized copy.

        Returns:
            Summary of what was removed
        """
        image_id = self._image_id(key)
        self._authorize(subject_id, key, "delete")

        labels_deleted = self.label_repository.delete(image_id)
        self.storage.delete_object(self.image_bucket, key)
        self.storage.delete_object(self.resized_bucket, resized_key_for(key))

        return {
            "deleted": key,
            "image": image_id,
            "labels_deleted": labels_deleted,
        }

    def _authorize(self, subject_id: Optional[str], key: str, action: str) -> None:
        if self.access_policy is not None:
            self.access_policy.authorize(subject_id, key, action)

    def _image_id(self, key: str) -> str:
        self._require_key(key)
        try:
            return image_id_from_key(key, self.upload_prefix)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

    @staticmethod
    def _require_key(key: str) -> None:
        if not key or not key.strip():
            raise InvalidRequestError("Parameter 'key' is required")
