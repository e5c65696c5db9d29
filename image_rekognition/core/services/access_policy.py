"""
Per-identity storage access policy.

Every identity may only read, write and list under its own prefix
'private/<subject_id>/'. The check runs before any storage access and
mirrors the authenticated IAM role attached to the identity pool.
"""
from typing import Optional

from ..exceptions import AuthorizationError
from ..models.image import DEFAULT_UPLOAD_PREFIX, owner_of


class AccessPolicy:
    """Authorization predicate: subject_id == prefix_owner."""

    def __init__(self, upload_prefix: str = DEFAULT_UPLOAD_PREFIX):
        self.upload_prefix = upload_prefix

    def is_authorized(self, subject_id: Optional[str], key: str) -> bool:
        """
        Check whether an identity may access a key or list a prefix.

        Args:
            subject_id: Authenticated subject, None for anonymous callers
            key: Object key or listing prefix

        Returns:
            True only when the key lies under the subject's own prefix
        """
        if not subject_id:
            return False
        owner = owner_of(key, self.upload_prefix)
        return owner is not None and owner == subject_id

    def authorize(self, subject_id: Optional[str], key: str, action: str) -> None:
        """
        Raises:
            AuthorizationError: If the subject does not own the key
        """
        if not self.is_authorized(subject_id, key):
            raise AuthorizationError(
                f"Subject '{subject_id}' is not allowed to {action} '{key}'"
            )
