"""
auth/dependencies.py -- FastAPI Depends() helpers for bearer authentication.

Tokens arrive in the Authorization: Bearer <token> header and are verified
against the JwtConfig stored on app.state at startup (signature, lifetime,
issuer, audience).

try_get_token_claims() is the soft variant (returns None on failure).
get_token_claims() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from cache/. auth/dependencies.py may import from
fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.tokens import decode_access_token


def try_get_token_claims(request: Request) -> dict | None:
    """Return the verified claims of the request's bearer token, or None.

    Never raises -- callers that need a hard 401 should use get_token_claims().
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return decode_access_token(auth_header[7:], request.app.state.jwt_config)


def get_token_claims(request: Request) -> dict:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: dict = Depends(get_token_claims)): ...
    """
    claims = try_get_token_claims(request)
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
        )
    return claims
