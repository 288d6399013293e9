"""
auth/service.py -- The account workflow: register, login, logout, profile and passwords.

Every public operation returns a ServiceResult. Nothing raised inside an
operation crosses this boundary: validation and business-rule failures are
returned as failed results with a human-readable message, and any
unexpected exception (store or token signing) is logged here and replaced
by the opaque "Internal server error." result.

Known gaps carried as-is:
  - Passwords are stored and compared in plaintext.
  - reset_password() asks for nothing but the email address.
  - The exists-then-insert sequence in register() is not atomic; the UNIQUE
    email column decides concurrent duplicates.

Layer rule: no imports from api/ or cache/. The store is any UserRepository,
so the workflow does not know whether a cache sits in front of it.
"""

from __future__ import annotations

import functools
import hmac
import logging

from auth.models import Credentials, LoginOutcome, Registration, RegistrationOutcome, Role, User
from auth.store import UserRepository
from auth.tokens import TokenIssuer
from auth.validators import validate_login, validate_password, validate_registration
from core.results import ServiceResult, failure, internal_error, success

logger = logging.getLogger("usermanagement.auth")

_ERROR_SEPARATOR = " | "


def _guarded(action: str):
    """Convert any exception escaping the wrapped operation into internal_error().

    The original exception is only written to the log.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> ServiceResult:
            try:
                return func(*args, **kwargs)
            except Exception:
                logger.exception("Unexpected error while %s", action)
                return internal_error()

        return wrapper

    return decorator


def _passwords_match(supplied: str, stored: str) -> bool:
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


class AuthService:
    def __init__(self, store: UserRepository, tokens: TokenIssuer) -> None:
        self._store = store
        self._tokens = tokens

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    @_guarded("registering user")
    def register(self, registration: Registration) -> ServiceResult[RegistrationOutcome]:
        errors = validate_registration(registration)
        if errors:
            error = _ERROR_SEPARATOR.join(errors)
            logger.warning("User registration failed validation: %s", error)
            return failure(error, "validation_error")

        if registration.password != registration.confirm_password:
            logger.warning("User registration failed: passwords do not match for email %s", registration.email)
            return failure("Passwords do not match.", "password_mismatch")

        if self._store.get_by_email(registration.email) is not None:
            logger.warning("User registration failed: email %s already exists", registration.email)
            return failure("User already exists.", "user_exists")

        user = User(
            first_name=registration.first_name,
            last_name=registration.last_name,
            email=registration.email,
            password=registration.password,
            role=Role.USER,
        )
        self._store.add(user)
        logger.info("Registered user %s", user.id)
        outcome = RegistrationOutcome(success=True, message="Registration successful")
        return success(outcome.message, outcome)

    @_guarded("logging in")
    def login(self, credentials: Credentials) -> ServiceResult[LoginOutcome]:
        """Verify credentials and issue a bearer token.

        Unknown email and wrong password produce the same message so the
        response does not reveal which accounts exist.
        """
        errors = validate_login(credentials)
        if errors:
            error = _ERROR_SEPARATOR.join(errors)
            logger.warning("Login failed validation for email %s: %s", credentials.email, error)
            return failure(error, "validation_error")

        user = self._store.get_by_email(credentials.email)
        if user is None or not _passwords_match(credentials.password, user.password):
            logger.warning("Login failed: invalid credentials for email %s", credentials.email)
            return failure("Invalid email or password.", "invalid_credentials")

        token = self._tokens.issue(user)
        outcome = LoginOutcome(success=True, message="Login successful", token=token)
        return success(outcome.message, outcome)

    def logout(self) -> ServiceResult:
        """No server-side session exists, so there is nothing to invalidate."""
        return success("Logout successful.")

    # ------------------------------------------------------------------
    # Profile and passwords
    # ------------------------------------------------------------------

    @_guarded("updating profile")
    def setup_profile(self, email: str, first_name: str, last_name: str) -> ServiceResult:
        user = self._store.get_by_email(email)
        if user is None:
            logger.warning("Profile update failed: user not found for email %s", email)
            return failure("User not found.", "user_not_found")

        user.first_name = first_name
        user.last_name = last_name
        self._store.update(user)
        return success("Profile updated successfully.")

    @_guarded("changing password")
    def change_password(self, email: str, old_password: str, new_password: str) -> ServiceResult:
        user = self._store.get_by_email(email)
        if user is None:
            logger.warning("Change password failed: user not found for email %s", email)
            return failure("User not found.", "user_not_found")

        if not _passwords_match(old_password, user.password):
            logger.warning("Change password failed: incorrect old password for user %s", email)
            return failure("Incorrect old password.", "incorrect_password")

        errors = validate_password(new_password)
        if errors:
            error = _ERROR_SEPARATOR.join(errors)
            logger.warning("New password validation failed for user %s: %s", email, error)
            return failure(error, "validation_error")

        user.password = new_password
        self._store.update(user)
        return success("Password changed successfully.")

    @_guarded("resetting password")
    def reset_password(self, email: str, new_password: str) -> ServiceResult:
        user = self._store.get_by_email(email)
        if user is None:
            logger.warning("Reset password failed: user not found for email %s", email)
            return failure("User not found.", "user_not_found")

        errors = validate_password(new_password)
        if errors:
            error = _ERROR_SEPARATOR.join(errors)
            logger.warning("Reset password validation failed for user %s: %s", email, error)
            return failure(error, "validation_error")

        user.password = new_password
        self._store.update(user)
        return success("Password has been reset.")

    # ------------------------------------------------------------------
    # Administration (management CLI)
    # ------------------------------------------------------------------

    def user_exists(self, email: str) -> bool:
        return self._store.exists(email)

    def delete_user(self, user_id: str) -> None:
        self._store.delete(user_id)
        logger.info("Deleted user %s", user_id)
