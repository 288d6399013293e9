"""Unit tests for auth/tokens.py -- bearer token issuance and verification.

Covers:
- issued tokens carry id, email, names and role plus issuer/audience
- expiry is exactly one hour after issuance
- a missing signing key is a ConfigurationError at construction time
- decode_access_token() rejects tampered, foreign and expired tokens
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.models import Role, User
from auth.tokens import TOKEN_LIFETIME, ConfigurationError, TokenIssuer, decode_access_token
from core.config import JwtConfig


@pytest.fixture
def user() -> User:
    return User(
        email="grace@example.com",
        password="Irrelevant123!",
        first_name="Grace",
        last_name="Hopper",
        role=Role.TRAINER,
    )


def test_token_carries_identity_claims(token_issuer: TokenIssuer, user: User, jwt_config: JwtConfig) -> None:
    claims = decode_access_token(token_issuer.issue(user), jwt_config)
    assert claims is not None
    assert claims["nameid"] == user.id
    assert claims["sub"] == user.id
    assert claims["email"] == "grace@example.com"
    assert claims["given_name"] == "Grace"
    assert claims["family_name"] == "Hopper"
    assert claims["role"] == "Trainer"
    assert claims["iss"] == jwt_config.issuer
    assert claims["aud"] == jwt_config.audience


def test_token_expires_exactly_one_hour_after_issue(token_issuer: TokenIssuer, user: User) -> None:
    before = int(datetime.now(timezone.utc).timestamp())
    claims = jwt.get_unverified_claims(token_issuer.issue(user))
    after = int(datetime.now(timezone.utc).timestamp())

    assert claims["exp"] - claims["iat"] == 3600
    assert TOKEN_LIFETIME == timedelta(hours=1)
    assert before <= claims["iat"] <= after


def test_token_is_hs256(token_issuer: TokenIssuer, user: User) -> None:
    header = jwt.get_unverified_header(token_issuer.issue(user))
    assert header["alg"] == "HS256"


@pytest.mark.parametrize("key", ["", None])
def test_missing_key_is_configuration_error(key, jwt_config: JwtConfig) -> None:
    with pytest.raises(ConfigurationError):
        TokenIssuer(replace(jwt_config, key=key))


def test_decode_rejects_wrong_key(token_issuer: TokenIssuer, user: User, jwt_config: JwtConfig) -> None:
    other = replace(jwt_config, key="another-signing-key-that-is-32-chars-long")
    assert decode_access_token(token_issuer.issue(user), other) is None


def test_decode_rejects_wrong_audience(token_issuer: TokenIssuer, user: User, jwt_config: JwtConfig) -> None:
    other = replace(jwt_config, audience="https://someone-else.test")
    assert decode_access_token(token_issuer.issue(user), other) is None


def test_decode_rejects_wrong_issuer(token_issuer: TokenIssuer, user: User, jwt_config: JwtConfig) -> None:
    other = replace(jwt_config, issuer="https://someone-else.test")
    assert decode_access_token(token_issuer.issue(user), other) is None


def test_decode_rejects_expired_token(jwt_config: JwtConfig) -> None:
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {
            "nameid": "abc",
            "role": "User",
            "iss": jwt_config.issuer,
            "aud": jwt_config.audience,
            "iat": issued,
            "exp": issued + TOKEN_LIFETIME,
        },
        jwt_config.key,
        algorithm="HS256",
    )
    assert decode_access_token(token, jwt_config) is None


def test_decode_rejects_garbage(jwt_config: JwtConfig) -> None:
    assert decode_access_token("not.a.jwt", jwt_config) is None
