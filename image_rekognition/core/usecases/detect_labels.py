"""
Detect labels use case.

Reads a newly created image, asks the detection service for labels, writes
a thumbnail to the resized bucket and stores the label record.
"""
from ..exceptions import InvalidEventError
from ..models.image import ImageObject, ResizedObject, image_id_from_key
from ..models.label import LabelRecord
from ..ports.label_detector import LabelDetectorPort
from ..ports.label_repository import LabelRepositoryPort
from ..ports.object_storage import ObjectStoragePort
from ..services.thumbnail_service import ThumbnailService


class DetectLabelsUseCase:
    """
    Use case run by the Detection Worker for every image notification.

    Detection happens before any write so a transient detection failure
    leaves no partial side effects behind.
    """

    def __init__(
        self,
        storage: ObjectStoragePort,
        label_repository: LabelRepositoryPort,
        label_detector: LabelDetectorPort,
        thumbnail_service: ThumbnailService,
        resized_bucket: str,
        upload_prefix: str = "private/",
        max_labels: int = 10,
        min_confidence: float = 70.0
    ):
        self.storage = storage
        self.label_repository = label_repository
        self.label_detector = label_detector
        self.thumbnail_service = thumbnail_service
        self.resized_bucket = resized_bucket
        self.upload_prefix = upload_prefix
        self.max_labels = max_labels
        self.min_confidence = min_confidence

    def execute(self, image: ImageObject) -> LabelRecord:
        """
        Process one image object.

        Args:
            image: The object referenced by the notification

        Returns:
            The stored label record

        Raises:
            InvalidEventError: If the key is outside the upload prefix
            ObjectNotFoundError: If the image was deleted before processing
            InvalidImageError: If the object cannot be decoded
            DetectionServiceError: On transient detection failures
        """
        try:
            image_id = image_id_from_key(image.key, self.upload_prefix)
        except ValueError as e:
            raise InvalidEventError(str(e)) from e

        # Fails with ObjectNotFoundError when the upload is already gone
        image_data = self.storage.get_object(image.bucket, image.key)

        labels = self.label_detector.detect_labels(
            image.bucket, image.key, self.max_labels, self.min_confidence
        )

        thumbnail = self.thumbnail_service.create_thumbnail(image_data)
        resized = ResizedObject.for_source(
            image,
            bucket=self.resized_bucket,
            width=thumbnail.width,
            height=thumbnail.height,
            content_type=thumbnail.content_type,
        )
        self.storage.put_object(resized.bucket, resized.key, thumbnail.data, resized.content_type)

        record = LabelRecord.create(
            image_id=image_id,
            source_key=image.key,
            labels=labels,
            resized_key=resized.key,
        )
        return self.label_repository.save(record)
