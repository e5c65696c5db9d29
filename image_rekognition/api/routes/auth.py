"""
/auth routes: sign-up, email confirmation and sign-in against the user pool.

The identity provider is the source of truth for account state, so each
request rebuilds the Identity in the state its route expects and lets the
provider reject anything that does not match.
"""
from fastapi import APIRouter, Depends, HTTPException

from image_rekognition.api.dependencies import get_identity_registration_use_case
from image_rekognition.core.exceptions import (
    AuthorizationError,
    IdentityStateError,
    InvalidRequestError
)
from image_rekognition.core.models.identity import Identity, IdentityStatus
from image_rekognition.core.usecases.identity_registration import IdentityRegistrationUseCase
from image_rekognition.infrastructure.logging.log_config import get_logger
from image_rekognition.schemas.identity import (
    ConfirmRequest,
    ConfirmResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse
)

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, AuthorizationError):
        return HTTPException(status_code=401, detail=str(error), headers={"WWW-Authenticate": "Bearer"})
    if isinstance(error, IdentityStateError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


@router.post("/sign-up", response_model=SignUpResponse)
def sign_up(
    request: SignUpRequest,
    use_case: IdentityRegistrationUseCase = Depends(get_identity_registration_use_case)
) -> SignUpResponse:
    """
    Register a user. The account stays unusable until the emailed code is confirmed.

    Raises:
        HTTPException: 400 if the username exists or the password is rejected
    """
    try:
        identity = use_case.sign_up(request.username, request.email, request.password)
    except (ValueError, InvalidRequestError) as e:
        raise to_http_error(e)

    logger.info("Identity signed up", extra={
        "extra_fields": {"username": identity.username, "status": identity.status.value}
    })
    return SignUpResponse(username=identity.username, status=identity.status.value)


@router.post("/confirm", response_model=ConfirmResponse)
def confirm(
    request: ConfirmRequest,
    use_case: IdentityRegistrationUseCase = Depends(get_identity_registration_use_case)
) -> ConfirmResponse:
    """
    Raises:
        HTTPException: 401 on a wrong or expired code, 409 if already confirmed
    """
    identity = Identity(username=request.username, email="", status=IdentityStatus.SIGNED_UP)
    try:
        use_case.confirm(identity, request.confirmation_code)
    except (AuthorizationError, IdentityStateError, InvalidRequestError) as e:
        raise to_http_error(e)

    return ConfirmResponse(username=identity.username, status=identity.status.value)


@router.post("/sign-in", response_model=SignInResponse)
def sign_in(
    request: SignInRequest,
    use_case: IdentityRegistrationUseCase = Depends(get_identity_registration_use_case)
) -> SignInResponse:
    """
    Exchange credentials for user-pool tokens.

    When an identity pool is configured the response also names the
    identity's storage prefix.

    Raises:
        HTTPException: 401 on bad credentials, 409 if the email is unverified
    """
    identity = Identity(username=request.username, email="", status=IdentityStatus.VERIFIED)
    try:
        tokens = use_case.sign_in(identity, request.password)
    except (AuthorizationError, IdentityStateError, InvalidRequestError) as e:
        raise to_http_error(e)

    storage_prefix = identity.storage_prefix if identity.subject_id else None
    return SignInResponse(**tokens, subject_id=identity.subject_id, storage_prefix=storage_prefix)
