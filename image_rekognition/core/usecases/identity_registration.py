"""
Identity registration use case.
Drives an Identity through sign-up, email verification and sign-in.
"""
from typing import Dict, Any, Optional

from ..exceptions import IdentityStateError
from ..models.identity import Identity, IdentityStatus
from ..ports.identity_provider import IdentityProviderPort
from ..ports.token_verifier import TokenVerifierPort


class IdentityRegistrationUseCase:
    """
    When a token verifier is given, sign-in replaces the user-pool subject
    with the identity-pool identity that names the storage prefix.
    """

    def __init__(self, identity_provider: IdentityProviderPort,
                 token_verifier: Optional[TokenVerifierPort] = None):
        self.identity_provider = identity_provider
        self.token_verifier = token_verifier

    def sign_up(self, username: str, email: str, password: str) -> Identity:
        """
        Register an identity. It stays unusable until the email code is confirmed.
        """
        if not username or not email:
            raise ValueError("Username and email are required")
        identity = Identity(username=username, email=email)
        subject_id = self.identity_provider.sign_up(username, email, password)
        identity.mark_signed_up(subject_id)
        return identity

    def confirm(self, identity: Identity, confirmation_code: str) -> Identity:
        # Validate the transition before calling the provider
        if identity.status is not IdentityStatus.SIGNED_UP:
            raise IdentityStateError(
                f"Identity '{identity.username}' is not pending verification"
            )
        self.identity_provider.confirm_sign_up(identity.username, confirmation_code)
        identity.mark_verified()
        return identity

    def sign_in(self, identity: Identity, password: str) -> Dict[str, Any]:
        """
        Returns:
            Provider tokens for the authenticated session

        Raises:
            IdentityStateError: If the identity has not been verified
            AuthorizationError: If the provider rejects the credentials
        """
        if not identity.is_usable:
            raise IdentityStateError(
                f"Identity '{identity.username}' must verify its email before signing in"
            )
        tokens = self.identity_provider.authenticate(identity.username, password)
        if self.token_verifier is not None:
            identity.subject_id = self.token_verifier.verify(tokens["id_token"])
        if identity.status is not IdentityStatus.AUTHENTICATED:
            identity.mark_authenticated()
        return tokens
