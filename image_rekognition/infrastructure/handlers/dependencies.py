"""
Dependency container for the Lambda handlers.

Adapters and use cases are created on first use and kept for the lifetime
of the execution environment, so warm invocations reuse AWS connections.
"""
from typing import Dict, Optional

from image_rekognition.adapters.auth.cognito_identity_provider import CognitoIdentityProvider
from image_rekognition.adapters.auth.cognito_token_verifier import CognitoTokenVerifier
from image_rekognition.adapters.detection.rekognition_label_detector import RekognitionLabelDetector
from image_rekognition.adapters.repositories.dynamodb_label_repository import DynamoDBLabelRepository
from image_rekognition.adapters.storage.s3_object_storage import S3ObjectStorage
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.ports.identity_provider import IdentityProviderPort
from image_rekognition.core.ports.label_detector import LabelDetectorPort
from image_rekognition.core.ports.label_repository import LabelRepositoryPort
from image_rekognition.core.ports.object_storage import ObjectStoragePort
from image_rekognition.core.ports.token_verifier import TokenVerifierPort
from image_rekognition.core.services.access_policy import AccessPolicy
from image_rekognition.core.services.thumbnail_service import ThumbnailService
from image_rekognition.core.usecases.detect_labels import DetectLabelsUseCase
from image_rekognition.core.usecases.identity_registration import IdentityRegistrationUseCase
from image_rekognition.core.usecases.image_management import ImageManagementUseCase
from image_rekognition.infrastructure.logging.log_config import get_logger

logger = get_logger(__name__)


class DependencyContainer:
    """
    Builds the object graph for both compute units.

    Tests replace individual ports by assigning the private attributes
    before the first use case is requested.
    """

    def __init__(self):
        self._storage: Optional[ObjectStoragePort] = None
        self._label_repository: Optional[LabelRepositoryPort] = None
        self._label_detector: Optional[LabelDetectorPort] = None
        self._token_verifier: Optional[TokenVerifierPort] = None
        self._identity_provider: Optional[IdentityProviderPort] = None
        self._identity_registration_use_case: Optional[IdentityRegistrationUseCase] = None
        self._detect_labels_use_case: Optional[DetectLabelsUseCase] = None
        self._image_management_use_cases: Dict[bool, ImageManagementUseCase] = {}

    def get_storage(self) -> ObjectStoragePort:
        if self._storage is None:
            self._storage = S3ObjectStorage()
        return self._storage

    def get_label_repository(self) -> LabelRepositoryPort:
        if self._label_repository is None:
            self._label_repository = DynamoDBLabelRepository(table_name=runtime_settings.table_name)
        return self._label_repository

    def get_label_detector(self) -> LabelDetectorPort:
        if self._label_detector is None:
            self._label_detector = RekognitionLabelDetector()
        return self._label_detector

    def get_token_verifier(self) -> Optional[TokenVerifierPort]:
        """The verifier exists only when an identity pool is configured."""
        if self._token_verifier is None and runtime_settings.identity_pool_id:
            self._token_verifier = CognitoTokenVerifier()
        return self._token_verifier

    def get_identity_provider(self) -> IdentityProviderPort:
        """
        Raises:
            ValueError: If no user pool client is configured
        """
        if self._identity_provider is None:
            self._identity_provider = CognitoIdentityProvider()
        return self._identity_provider

    def get_identity_registration_use_case(self) -> IdentityRegistrationUseCase:
        if self._identity_registration_use_case is None:
            self._identity_registration_use_case = IdentityRegistrationUseCase(
                identity_provider=self.get_identity_provider(),
                token_verifier=self.get_token_verifier()
            )
            logger.debug("Identity registration use case created")
        return self._identity_registration_use_case

    def get_detect_labels_use_case(self) -> DetectLabelsUseCase:
        if self._detect_labels_use_case is None:
            runtime_settings.validate_required()
            self._detect_labels_use_case = DetectLabelsUseCase(
                storage=self.get_storage(),
                label_repository=self.get_label_repository(),
                label_detector=self.get_label_detector(),
                thumbnail_service=ThumbnailService(max_size=runtime_settings.thumbnail_size),
                resized_bucket=runtime_settings.resized_bucket_name,
                upload_prefix=runtime_settings.upload_prefix,
                max_labels=runtime_settings.max_labels,
                min_confidence=runtime_settings.min_confidence
            )
            logger.debug("Detect labels use case created")
        return self._detect_labels_use_case

    def get_image_management_use_case(self, enforce_ownership: Optional[bool] = None) -> ImageManagementUseCase:
        """
        Args:
            enforce_ownership: Evaluate the per-identity access policy. Defaults
                to whether an identity pool is configured.
        """
        if enforce_ownership is None:
            enforce_ownership = bool(runtime_settings.identity_pool_id)

        if enforce_ownership not in self._image_management_use_cases:
            runtime_settings.validate_required()
            self._image_management_use_cases[enforce_ownership] = ImageManagementUseCase(
                storage=self.get_storage(),
                label_repository=self.get_label_repository(),
                image_bucket=runtime_settings.image_bucket_name,
                resized_bucket=runtime_settings.resized_bucket_name,
                upload_prefix=runtime_settings.upload_prefix,
                access_policy=AccessPolicy(runtime_settings.upload_prefix) if enforce_ownership else None
            )
            logger.debug("Image management use case created", extra={
                "extra_fields": {"enforce_ownership": enforce_ownership}
            })
        return self._image_management_use_cases[enforce_ownership]

    def reset(self) -> None:
        """Drop every cached dependency."""
        self.__init__()


# Global dependency container instance
_container = DependencyContainer()


def get_container() -> DependencyContainer:
    return _container
