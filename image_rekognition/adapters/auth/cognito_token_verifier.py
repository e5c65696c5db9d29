"""
Resolves a user-pool ID token to its identity-pool identity.

The identity-pool identity id is the value IAM substitutes for
${cognito-identity.amazonaws.com:sub}, so the subject returned here names
the same private/<subject>/ prefix the authenticated role grants.
"""
from typing import Optional

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.exceptions import AuthorizationError, StorageError
from image_rekognition.core.ports.token_verifier import TokenVerifierPort
from image_rekognition.infrastructure.logging.log_config import get_logger
from ..aws_errors import error_code, error_message

logger = get_logger(__name__)

REJECTED_TOKEN_CODES = {
    "NotAuthorizedException",
    "InvalidParameterException",
    "ResourceNotFoundException",
}


class CognitoTokenVerifier(TokenVerifierPort):
    """
    Args:
        identity_pool_id: Identity pool that federates the user pool
        provider_name: Login provider key, cognito-idp.<region>.amazonaws.com/<pool id>
    """

    def __init__(
        self,
        identity_pool_id: Optional[str] = None,
        provider_name: Optional[str] = None,
        cognito_identity_client=None
    ):
        self.identity_pool_id = identity_pool_id or runtime_settings.identity_pool_id
        self.provider_name = provider_name or runtime_settings.user_pool_provider_name
        self._client = cognito_identity_client

    @property
    def client(self):
        if self._client is None:
            self._client = aws_config.cognito_identity_client
        return self._client

    def verify(self, token: str) -> str:
        token = strip_bearer(token)
        if not token:
            raise AuthorizationError("Missing authorization token")
        if not self.identity_pool_id or not self.provider_name:
            raise AuthorizationError("Identity pool is not configured")

        # Resolved on every call so expired or revoked tokens are rejected
        try:
            response = self.client.get_id(
                IdentityPoolId=self.identity_pool_id,
                Logins={self.provider_name: token}
            )
        except ClientError as e:
            if error_code(e) in REJECTED_TOKEN_CODES:
                logger.warning("Rejected authorization token", extra={
                    "extra_fields": {"error_code": error_code(e)}
                })
                raise AuthorizationError(error_message(e)) from e
            raise StorageError(error_message(e), operation="get_id") from e

        return response['IdentityId']


def strip_bearer(token: Optional[str]) -> str:
    if not token:
        return ""
    token = token.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token
