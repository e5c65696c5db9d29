"""
Pydantic models for the local Front-End API gateway.
"""
from .images import (
    ImageListResponse,
    LabelRecordResponse,
    DeleteImageResponse,
    ErrorResponse
)
from .identity import (
    SignUpRequest,
    SignUpResponse,
    ConfirmRequest,
    ConfirmResponse,
    SignInRequest,
    SignInResponse
)

__all__ = [
    "ImageListResponse",
    "LabelRecordResponse",
    "DeleteImageResponse",
    "ErrorResponse",
    "SignUpRequest",
    "SignUpResponse",
    "ConfirmRequest",
    "ConfirmResponse",
    "SignInRequest",
    "SignInResponse"
]
