"""
Shared test configuration and fixtures for image recognition tests.
"""
import os

# The environment contract must exist before settings are imported
os.environ.update({
    'ENVIRONMENT': 'test',
    'AWS_REGION': 'us-east-1',
    'AWS_DEFAULT_REGION': 'us-east-1',
    'AWS_ACCESS_KEY_ID': 'testing',
    'AWS_SECRET_ACCESS_KEY': 'testing',
    'TABLE': 'image-labels-test',
    'BUCKET': 'image-bucket-test',
    'RESIZEDBUCKET': 'resized-bucket-test',
    'LOG_LEVEL': 'WARNING',
})

import pytest
from unittest.mock import Mock

from image_rekognition.core.services.access_policy import AccessPolicy
from image_rekognition.core.services.thumbnail_service import ThumbnailService
from image_rekognition.core.usecases.detect_labels import DetectLabelsUseCase
from image_rekognition.core.usecases.image_management import ImageManagementUseCase
from image_rekognition.infrastructure.handlers.dependencies import get_container

from tests.utils.fakes import InMemoryLabelRepository, InMemoryObjectStorage
from tests.utils.mock_helpers import MockHelpers

IMAGE_BUCKET = 'image-bucket-test'
RESIZED_BUCKET = 'resized-bucket-test'
SUBJECT_A = 'us-east-1:11111111-aaaa-4aaa-aaaa-111111111111'
SUBJECT_B = 'us-east-1:22222222-bbbb-4bbb-bbbb-222222222222'


@pytest.fixture(autouse=True)
def reset_container():
    """Each test starts with an empty dependency container."""
    get_container().reset()
    yield
    get_container().reset()


# FAKE PORT FIXTURES

@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def label_repository() -> InMemoryLabelRepository:
    return InMemoryLabelRepository()


@pytest.fixture
def mock_label_detector() -> Mock:
    return MockHelpers.create_mock_label_detector()


# USE CASE FIXTURES

@pytest.fixture
def detect_labels_use_case(storage, label_repository, mock_label_detector) -> DetectLabelsUseCase:
    return DetectLabelsUseCase(
        storage=storage,
        label_repository=label_repository,
        label_detector=mock_label_detector,
        thumbnail_service=ThumbnailService(max_size=32),
        resized_bucket=RESIZED_BUCKET
    )


@pytest.fixture
def image_management(storage, label_repository) -> ImageManagementUseCase:
    return ImageManagementUseCase(
        storage=storage,
        label_repository=label_repository,
        image_bucket=IMAGE_BUCKET,
        resized_bucket=RESIZED_BUCKET,
        access_policy=AccessPolicy()
    )


# TEST DATA FIXTURES

@pytest.fixture
def png_bytes() -> bytes:
    return MockHelpers.create_image_bytes(width=128, height=64)


@pytest.fixture
def key_a() -> str:
    return f"private/{SUBJECT_A}/cat.png"


@pytest.fixture
def key_b() -> str:
    return f"private/{SUBJECT_B}/dog.png"
