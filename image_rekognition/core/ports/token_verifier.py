"""
Token verification port for the Front-End API routing layer.
"""
from abc import ABC, abstractmethod


class TokenVerifierPort(ABC):

    @abstractmethod
    def verify(self, token: str) -> str:
        """
        Verify a bearer token against the identity provider.

        Args:
            token: ID token issued by the user pool, without the 'Bearer ' scheme

        Returns:
            Subject identifier of the authenticated identity

        Raises:
            AuthorizationError: If the token is missing, expired or invalid
        """
        pass
