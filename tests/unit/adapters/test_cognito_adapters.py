"""
Test the Cognito identity provider and token verifier adapters.
"""
from unittest.mock import Mock

import pytest

from image_rekognition.adapters.auth import CognitoIdentityProvider, CognitoTokenVerifier, strip_bearer
from image_rekognition.core.exceptions import (
    AuthorizationError,
    IdentityStateError,
    InvalidRequestError,
    StorageError,
)
from tests.utils.mock_helpers import MockHelpers

POOL_ID = "us-east-1:pool-0000"
PROVIDER = "cognito-idp.us-east-1.amazonaws.com/us-east-1_Example"


@pytest.fixture
def cognito_client() -> Mock:
    client = Mock()
    client.sign_up.return_value = {'UserSub': 'user-sub-1', 'UserConfirmed': False}
    client.initiate_auth.return_value = {
        'AuthenticationResult': {
            'AccessToken': 'access', 'IdToken': 'id-token', 'RefreshToken': 'refresh', 'ExpiresIn': 3600
        }
    }
    return client


@pytest.fixture
def identity_client() -> Mock:
    client = Mock()
    client.get_id.return_value = {'IdentityId': 'us-east-1:identity-1'}
    return client


@pytest.mark.unit
class TestCognitoIdentityProvider:

    def test_requires_client_id(self):
        with pytest.raises(ValueError):
            CognitoIdentityProvider(cognito_client=Mock())

    def test_sign_up_returns_subject(self, cognito_client):
        provider = CognitoIdentityProvider("client-1", cognito_client)

        assert provider.sign_up("alice", "alice@example.com", "Secret123!") == 'user-sub-1'
        cognito_client.sign_up.assert_called_once_with(
            ClientId="client-1",
            Username="alice",
            Password="Secret123!",
            UserAttributes=[{'Name': 'email', 'Value': "alice@example.com"}]
        )

    def test_authenticate_returns_tokens(self, cognito_client):
        tokens = CognitoIdentityProvider("client-1", cognito_client).authenticate("alice", "Secret123!")
        assert tokens == {
            'access_token': 'access', 'id_token': 'id-token', 'refresh_token': 'refresh', 'expires_in': 3600
        }
        assert cognito_client.initiate_auth.call_args.kwargs['AuthFlow'] == 'USER_PASSWORD_AUTH'

    def test_challenge_is_not_a_session(self, cognito_client):
        cognito_client.initiate_auth.return_value = {'ChallengeName': 'NEW_PASSWORD_REQUIRED'}
        with pytest.raises(AuthorizationError):
            CognitoIdentityProvider("client-1", cognito_client).authenticate("alice", "Secret123!")

    @pytest.mark.parametrize("code, expected", [
        ("UserNotConfirmedException", IdentityStateError),
        ("UsernameExistsException", InvalidRequestError),
        ("InvalidPasswordException", InvalidRequestError),
        ("NotAuthorizedException", AuthorizationError),
        ("CodeMismatchException", AuthorizationError),
        ("InternalErrorException", StorageError),
    ])
    def test_error_mapping(self, cognito_client, code, expected):
        cognito_client.initiate_auth.side_effect = MockHelpers.create_client_error(code, "failed", "InitiateAuth")
        with pytest.raises(expected):
            CognitoIdentityProvider("client-1", cognito_client).authenticate("alice", "Secret123!")


@pytest.mark.unit
class TestCognitoTokenVerifier:

    def test_resolves_identity_pool_subject(self, identity_client):
        verifier = CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client)

        assert verifier.verify("Bearer id-token") == 'us-east-1:identity-1'
        identity_client.get_id.assert_called_once_with(
            IdentityPoolId=POOL_ID, Logins={PROVIDER: 'id-token'}
        )

    def test_token_revoked_after_first_use_is_rejected(self, identity_client):
        verifier = CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client)
        assert verifier.verify("Bearer id-token") == 'us-east-1:identity-1'

        identity_client.get_id.side_effect = MockHelpers.create_client_error(
            "NotAuthorizedException", "Token expired", "GetId"
        )
        with pytest.raises(AuthorizationError):
            verifier.verify("Bearer id-token")
        assert identity_client.get_id.call_count == 2

    def test_verifier_keeps_no_per_token_state(self, identity_client):
        verifier = CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client)
        state_before = dict(vars(verifier))
        for i in range(50):
            verifier.verify(f"token-{i}")
        assert vars(verifier) == state_before

    @pytest.mark.parametrize("token", [None, "", "Bearer ", "   "])
    def test_missing_token(self, identity_client, token):
        with pytest.raises(AuthorizationError):
            CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client).verify(token)
        identity_client.get_id.assert_not_called()

    def test_unconfigured_pool_rejects(self, identity_client):
        with pytest.raises(AuthorizationError):
            CognitoTokenVerifier(cognito_identity_client=identity_client).verify("id-token")

    def test_rejected_token(self, identity_client):
        identity_client.get_id.side_effect = MockHelpers.create_client_error(
            "NotAuthorizedException", "Invalid login token", "GetId"
        )
        with pytest.raises(AuthorizationError):
            CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client).verify("expired")

    def test_service_failure_is_not_an_authorization_error(self, identity_client):
        identity_client.get_id.side_effect = MockHelpers.create_client_error(
            "InternalErrorException", "boom", "GetId"
        )
        with pytest.raises(StorageError):
            CognitoTokenVerifier(POOL_ID, PROVIDER, identity_client).verify("id-token")


@pytest.mark.unit
@pytest.mark.parametrize("raw, expected", [
    ("Bearer abc", "abc"),
    ("bearer abc ", "abc"),
    ("abc", "abc"),
    (None, ""),
])
def test_strip_bearer(raw, expected):
    assert strip_bearer(raw) == expected
