"""
Stateless domain services.
"""
from .access_policy import AccessPolicy
from .thumbnail_service import Thumbnail, ThumbnailService

__all__ = ["AccessPolicy", "Thumbnail", "ThumbnailService"]
