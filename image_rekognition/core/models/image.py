"""
Image domain entities.
Storage keys, image identifiers and ownership are derived here so every
component maps an upload to its label record the same way.
"""
from dataclasses import dataclass
from typing import Optional

DEFAULT_UPLOAD_PREFIX = "private/"


def image_id_from_key(key: str, upload_prefix: str = DEFAULT_UPLOAD_PREFIX) -> str:
    """
    Derive the label record key from an image storage key.

    Args:
        key: Storage key like 'private/<sub>/photo.jpg'
        upload_prefix: Prefix under which uploads are stored

    Returns:
        Image identifier like '<sub>/photo.jpg'

    Raises:
        ValueError: If the key is empty or outside the upload prefix
    """
    if not key:
        raise ValueError("Storage key cannot be empty")
    if not key.startswith(upload_prefix) or len(key) == len(upload_prefix):
        raise ValueError(f"Storage key '{key}' is not under upload prefix '{upload_prefix}'")
    return key[len(upload_prefix):]


def resized_key_for(key: str) -> str:
    """Resized objects keep their source key inside the resized bucket."""
    return key


def owner_of(key: str, upload_prefix: str = DEFAULT_UPLOAD_PREFIX) -> Optional[str]:
    """
    Extract the owning subject from a storage key or listing prefix.

    'private/<sub>/photo.jpg' and 'private/<sub>/' are owned by '<sub>'.
    Keys outside the upload prefix, or without a subject segment followed by
    '/', have no owner.
    """
    if not key or not key.startswith(upload_prefix):
        return None
    remainder = key[len(upload_prefix):]
    subject, separator, _ = remainder.partition("/")
    if not subject or not separator:
        return None
    return subject


def owner_prefix(subject_id: str, upload_prefix: str = DEFAULT_UPLOAD_PREFIX) -> str:
    """Storage prefix reserved for one identity."""
    if not subject_id or "/" in subject_id:
        raise ValueError(f"Invalid subject identifier '{subject_id}'")
    return f"{upload_prefix}{subject_id}/"


@dataclass(frozen=True)
class ImageObject:
    """A raw uploaded image in the image bucket."""
    bucket: str
    key: str
    size: int = 0
    etag: str = ""


@dataclass(frozen=True)
class ResizedObject:
    """A thumbnail derived from an ImageObject."""
    bucket: str
    key: str
    width: int
    height: int
    content_type: str = "image/jpeg"

    @classmethod
    def for_source(cls, source: ImageObject, bucket: str, width: int, height: int,
                   content_type: str = "image/jpeg") -> 'ResizedObject':
        return cls(
            bucket=bucket,
            key=resized_key_for(source.key),
            width=width,
            height=height,
            content_type=content_type,
        )
