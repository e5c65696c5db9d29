"""
Request and response schemas for the /auth routes.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    username: str = Field(..., min_length=1, description="User pool username")
    email: EmailStr = Field(..., description="Address the verification code is sent to")
    password: str = Field(..., min_length=1)


class SignUpResponse(BaseModel):
    username: str
    status: str
    message: str = "Check your email for the verification code"


class ConfirmRequest(BaseModel):
    username: str = Field(..., min_length=1)
    confirmation_code: str = Field(..., min_length=1, description="Code from the verification email")


class ConfirmResponse(BaseModel):
    username: str
    status: str


class SignInRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignInResponse(BaseModel):
    access_token: str
    id_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    subject_id: Optional[str] = Field(None, description="Identity-pool identity, when one is configured")
    storage_prefix: Optional[str] = Field(None, description="Prefix the identity may read and write")
