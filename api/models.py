"""
API request and response models for the user management REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request bodies use camelCase on the wire (firstName, confirmPassword, ...).
Missing or null fields become "" so that the workflow's own validation rules
-- not Pydantic -- decide what is required and produce the messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from auth.models import Credentials, Registration

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class _RequestBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        return "" if value is None else value


class RegisterRequest(_RequestBody):
    """Request body for POST /api/v1/register."""

    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)
    confirm_password: str = Field(default="", max_length=255)

    def to_registration(self) -> Registration:
        return Registration(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
        )


class LoginRequest(_RequestBody):
    """Request body for POST /api/v1/login."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)

    def to_credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)


class ChangePasswordRequest(_RequestBody):
    email: str = ""
    old_password: str = ""
    new_password: str = Field(default="", max_length=255)


class ResetPasswordRequest(_RequestBody):
    email: str = ""
    new_password: str = Field(default="", max_length=255)


class SetupProfileRequest(_RequestBody):
    email: str = ""
    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ResultResponse(BaseModel):
    """Success body shared by register, logout, password and profile routes."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str


class LoginResponse(ResultResponse):
    token: str


class MeResponse(BaseModel):
    """Identity claims read back from the caller's bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    first_name: str
    last_name: str
    role: str
    expires_at: int


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
