"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the configured key and
       carry the user id, email, given name, surname and role. They expire
       exactly one hour after issuance. There is no refresh token and no
       revocation list: a token stays valid until it expires, whatever
       happens to the account in the meantime.

  Config: TokenIssuer receives a JwtConfig at construction time and never
       reads Settings itself. A missing or empty signing key is rejected in
       the constructor with ConfigurationError, so the app fails at startup
       rather than on the first login.

  Verification: decode_access_token() checks signature, expiry, issuer and
       audience, and returns None on any failure -- the route layer turns
       that into a 401.

Layer rule: no imports from api/ or cache/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.models import Role, User
from core.config import JwtConfig

logger = logging.getLogger("usermanagement.auth")

_ALGORITHM = "HS256"

TOKEN_LIFETIME = timedelta(hours=1)


class ConfigurationError(Exception):
    """Raised when the token issuer is constructed without a signing key."""


class TokenIssuer:
    def __init__(self, config: JwtConfig) -> None:
        if not config.key:
            logger.critical("JWT key is missing in configuration.")
            raise ConfigurationError("JWT key is not configured.")
        self._config = config

    def issue(self, user: User) -> str:
        """Encode a signed JWT for user, expiring TOKEN_LIFETIME from now (UTC).

        Claim names follow the short JWT forms: nameid, email, given_name,
        family_name, role. sub duplicates nameid for generic JWT consumers.
        """
        # Truncate to whole seconds so exp - iat is exactly the lifetime.
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        payload = {
            "sub": user.id,
            "nameid": user.id,
            "email": user.email or "",
            "given_name": user.first_name or "",
            "family_name": user.last_name or "",
            "role": Role(user.role).value,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self._config.key, algorithm=_ALGORITHM)


def decode_access_token(token: str, config: JwtConfig) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Returning None (rather than raising) keeps the caller simple: any invalid
    token is treated as unauthenticated.
    """
    try:
        payload = jwt.decode(
            token,
            config.key,
            algorithms=[_ALGORITHM],
            audience=config.audience,
            issuer=config.issuer,
        )
    except JWTError:
        return None
    if "nameid" not in payload or "role" not in payload:
        return None
    return payload
