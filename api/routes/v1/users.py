"""
api/routes/v1/users.py -- Account REST endpoints.

Routes:
  POST /api/v1/register          -- create an account; 200 or 400
  POST /api/v1/login             -- verify credentials, return a bearer token; 200, 401 (400 for no body)
  POST /api/v1/logout            -- no-op; 200
  POST /api/v1/change-password   -- requires the old password; 200 or 400
  POST /api/v1/reset-password    -- email + new password only; 200 or 400
  POST /api/v1/setup-profile     -- overwrite first/last name; 200 or 400
  GET  /api/v1/me                -- claims of the caller's bearer token (requires auth)

Every handler delegates to AuthService and maps its ServiceResult onto a
status code. Failure bodies use the shared ErrorResponse envelope with the
result's message and error code.

Security:
  Cache-Control: no-store on login responses so tokens are never cached by
  intermediaries.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    ChangePasswordRequest,
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    ResetPasswordRequest,
    ResultResponse,
    SetupProfileRequest,
)
from auth.dependencies import get_token_claims
from auth.service import AuthService
from core.results import ServiceResult

# Auth policy:
# - every POST route is public; the workflow itself decides what is allowed
# - GET /api/v1/me: requires a valid bearer token (get_token_claims)
router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _service(request: Request) -> AuthService:
    return request.app.state.auth_service


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
    )


def _failure(status_code: int, result: ServiceResult) -> JSONResponse:
    return _error(status_code, result.message, result.error_code or f"http_{status_code}")


def _respond(result: ServiceResult) -> JSONResponse:
    """Map a plain result: 200 with the envelope, or 400 with its message."""
    if not result.success:
        return _failure(400, result)
    return JSONResponse(content=ResultResponse(success=True, message=result.message).model_dump())


# ---------------------------------------------------------------------------
# Registration and login
# ---------------------------------------------------------------------------


@router.post("/register", response_model=ResultResponse)
def register(request: Request, body: Optional[RegisterRequest] = None) -> JSONResponse:
    if body is None:
        return _error(400, "Invalid user data.", "invalid_request")

    result = _service(request).register(body.to_registration())
    if not result.success:
        return _failure(400, result)
    return JSONResponse(content=ResultResponse(success=result.data.success, message=result.data.message).model_dump())


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: Optional[LoginRequest] = None) -> JSONResponse:
    """Verify email and password and return a one-hour bearer token.

    Unknown email and wrong password return the same 401 message.
    """
    if body is None:
        return _error(400, "Invalid login data.", "invalid_request")

    result = _service(request).login(body.to_credentials())
    if not result.success:
        resp = _failure(401, result)
    else:
        resp = JSONResponse(
            content=LoginResponse(
                success=result.data.success,
                message=result.data.message,
                token=result.data.token,
            ).model_dump()
        )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=ResultResponse)
def logout(request: Request) -> JSONResponse:
    """Acknowledge a logout. Issued tokens stay valid until they expire."""
    return _respond(_service(request).logout())


# ---------------------------------------------------------------------------
# Passwords and profile
# ---------------------------------------------------------------------------


@router.post("/change-password", response_model=ResultResponse)
def change_password(request: Request, body: ChangePasswordRequest) -> JSONResponse:
    return _respond(_service(request).change_password(body.email, body.old_password, body.new_password))


@router.post("/reset-password", response_model=ResultResponse)
def reset_password(request: Request, body: ResetPasswordRequest) -> JSONResponse:
    """Set a new password for an email address. No reset token is required."""
    return _respond(_service(request).reset_password(body.email, body.new_password))


@router.post("/setup-profile", response_model=ResultResponse)
def setup_profile(request: Request, body: SetupProfileRequest) -> JSONResponse:
    return _respond(_service(request).setup_profile(body.email, body.first_name, body.last_name))


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/me", response_model=MeResponse)
def me(claims: dict = Depends(get_token_claims)) -> MeResponse:
    """Return the identity carried by the caller's bearer token."""
    return MeResponse(
        user_id=claims["nameid"],
        email=claims.get("email", ""),
        first_name=claims.get("given_name", ""),
        last_name=claims.get("family_name", ""),
        role=claims["role"],
        expires_at=claims["exp"],
    )
