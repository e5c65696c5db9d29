"""
Identity provider port.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any


class IdentityProviderPort(ABC):
    """
    Sign-up, verification and sign-in against the user pool.
    Token issuance itself is owned by the provider.
    """

    @abstractmethod
    def sign_up(self, username: str, email: str, password: str) -> str:
        """
        Register a new identity pending email verification.

        Returns:
            Subject identifier assigned by the provider
        """
        pass

    @abstractmethod
    def confirm_sign_up(self, username: str, confirmation_code: str) -> None:
        """
        Raises:
            AuthorizationError: If the code is wrong or expired
        """
        pass

    @abstractmethod
    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        """
        Returns:
            Dict with access_token, id_token, refresh_token and expires_in

        Raises:
            AuthorizationError: If credentials are rejected or the identity is unverified
        """
        pass
