"""
Application use cases.
"""
from .detect_labels import DetectLabelsUseCase
from .image_management import ImageManagementUseCase
from .identity_registration import IdentityRegistrationUseCase

__all__ = [
    "DetectLabelsUseCase",
    "ImageManagementUseCase",
    "IdentityRegistrationUseCase",
]
