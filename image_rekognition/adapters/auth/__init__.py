from .cognito_token_verifier import CognitoTokenVerifier, strip_bearer
from .cognito_identity_provider import CognitoIdentityProvider

__all__ = ["CognitoTokenVerifier", "CognitoIdentityProvider", "strip_bearer"]
