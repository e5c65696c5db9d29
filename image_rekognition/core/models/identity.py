"""
Identity domain entity.
Tracks an end user through sign-up, email verification and sign-in.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Set

from ..exceptions import IdentityStateError
from .image import owner_prefix


class IdentityStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    SIGNED_UP = "signed_up"
    VERIFIED = "verified"
    AUTHENTICATED = "authenticated"


_ALLOWED_TRANSITIONS: Dict[IdentityStatus, Set[IdentityStatus]] = {
    IdentityStatus.UNAUTHENTICATED: {IdentityStatus.SIGNED_UP},
    IdentityStatus.SIGNED_UP: {IdentityStatus.VERIFIED},
    IdentityStatus.VERIFIED: {IdentityStatus.AUTHENTICATED},
    IdentityStatus.AUTHENTICATED: {IdentityStatus.VERIFIED},
}


@dataclass
class Identity:
    """
    An end user of the application.

    subject_id is assigned by the identity provider at sign-up and names the
    storage prefix the user may access.
    """
    username: str
    email: str
    status: IdentityStatus = IdentityStatus.UNAUTHENTICATED
    subject_id: Optional[str] = None

    def _transition(self, target: IdentityStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise IdentityStateError(
                f"Cannot move identity '{self.username}' from {self.status.value} to {target.value}"
            )
        self.status = target

    def mark_signed_up(self, subject_id: str) -> None:
        if not subject_id:
            raise ValueError("Subject identifier cannot be empty")
        self._transition(IdentityStatus.SIGNED_UP)
        self.subject_id = subject_id

    def mark_verified(self) -> None:
        self._transition(IdentityStatus.VERIFIED)

    def mark_authenticated(self) -> None:
        """Only verified identities can sign in."""
        self._transition(IdentityStatus.AUTHENTICATED)

    def sign_out(self) -> None:
        self._transition(IdentityStatus.VERIFIED)

    @property
    def is_usable(self) -> bool:
        return self.status in (IdentityStatus.VERIFIED, IdentityStatus.AUTHENTICATED)

    @property
    def storage_prefix(self) -> str:
        if self.subject_id is None:
            raise IdentityStateError(f"Identity '{self.username}' has no subject yet")
        return owner_prefix(self.subject_id)
