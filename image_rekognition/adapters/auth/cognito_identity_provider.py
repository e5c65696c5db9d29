"""
Cognito user pool implementation of IdentityProviderPort.
"""
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.exceptions import (
    AuthorizationError,
    IdentityStateError,
    InvalidRequestError,
    StorageError,
)
from image_rekognition.core.ports.identity_provider import IdentityProviderPort
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from ..aws_errors import error_code, error_message

_CREDENTIAL_CODES = {
    "NotAuthorizedException",
    "CodeMismatchException",
    "ExpiredCodeException",
    "UserNotFoundException",
}
_REQUEST_CODES = {"InvalidPasswordException", "InvalidParameterException"}


class CognitoIdentityProvider(IdentityProviderPort):
    """
    Talks to a user pool app client created without a client secret, so
    no SECRET_HASH is sent.
    """

    def __init__(self, client_id: Optional[str] = None, cognito_client=None):
        self.client_id = client_id or runtime_settings.cognito_user_pool_client_id
        if not self.client_id:
            raise ValueError("User pool client id is required")
        self._client = cognito_client

    @property
    def client(self):
        if self._client is None:
            self._client = aws_config.cognito_client
        return self._client

    @log_infrastructure_operation("cognito_sign_up", **op_config(args=False))
    def sign_up(self, username: str, email: str, password: str) -> str:
        try:
            response = self.client.sign_up(
                ClientId=self.client_id,
                Username=username,
                Password=password,
                UserAttributes=[{'Name': 'email', 'Value': email}]
            )
        except ClientError as e:
            raise self._translate(e, "sign_up") from e
        return response['UserSub']

    @log_infrastructure_operation("cognito_confirm_sign_up", **op_config(args=False))
    def confirm_sign_up(self, username: str, confirmation_code: str) -> None:
        try:
            self.client.confirm_sign_up(
                ClientId=self.client_id,
                Username=username,
                ConfirmationCode=confirmation_code
            )
        except ClientError as e:
            raise self._translate(e, "confirm_sign_up") from e

    @log_infrastructure_operation("cognito_authenticate", **op_config(args=False, result=False))
    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        try:
            response = self.client.initiate_auth(
                ClientId=self.client_id,
                AuthFlow='USER_PASSWORD_AUTH',
                AuthParameters={'USERNAME': username, 'PASSWORD': password}
            )
        except ClientError as e:
            raise self._translate(e, "initiate_auth") from e

        result = response.get('AuthenticationResult')
        if not result:
            raise AuthorizationError(
                f"Sign-in requires challenge {response.get('ChallengeName', 'unknown')}"
            )
        return {
            'access_token': result['AccessToken'],
            'id_token': result['IdToken'],
            'refresh_token': result.get('RefreshToken'),
            'expires_in': result.get('ExpiresIn'),
        }

    @staticmethod
    def _translate(error: ClientError, operation: str) -> Exception:
        code = error_code(error)
        message = error_message(error)
        if code == "UserNotConfirmedException":
            return IdentityStateError(message)
        if code == "UsernameExistsException" or code in _REQUEST_CODES:
            return InvalidRequestError(message)
        if code in _CREDENTIAL_CODES:
            return AuthorizationError(message)
        return StorageError(message, operation=operation)
