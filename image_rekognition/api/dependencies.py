"""
FastAPI dependencies for the local gateway.
The bearer check plays the role of the API Gateway Cognito authorizer.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException

from image_rekognition.adapters.auth.cognito_token_verifier import CognitoTokenVerifier
from image_rekognition.core.exceptions import AuthorizationError
from image_rekognition.core.ports.token_verifier import TokenVerifierPort
from image_rekognition.core.usecases.identity_registration import IdentityRegistrationUseCase
from image_rekognition.infrastructure.handlers.dependencies import get_container
from image_rekognition.infrastructure.handlers.image_service import ImageRequestHandler


def get_token_verifier() -> TokenVerifierPort:
    # Without an identity pool the verifier rejects every token
    return get_container().get_token_verifier() or CognitoTokenVerifier()


def get_subject_id(
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifierPort = Depends(get_token_verifier)
) -> str:
    """
    Resolve the caller before any handler runs.

    Raises:
        HTTPException: 401 when the token is missing or rejected
    """
    try:
        return verifier.verify(authorization or "")
    except AuthorizationError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer", "Access-Control-Allow-Origin": "*"}
        )


def get_image_request_handler() -> ImageRequestHandler:
    """Ownership is always enforced behind the local gateway."""
    use_case = get_container().get_image_management_use_case(enforce_ownership=True)
    return ImageRequestHandler(use_case)


def get_identity_registration_use_case() -> IdentityRegistrationUseCase:
    """
    Raises:
        HTTPException: 503 when no user pool client is configured
    """
    try:
        return get_container().get_identity_registration_use_case()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))
