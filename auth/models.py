"""
auth/models.py -- Domain dataclasses for user accounts.

Pattern: Data class (pure data container, zero logic). Stores, validators
and the workflow in auth/service.py do the work.

Layer rule: no imports from api/ or cache/.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    USER = "User"
    TRAINER = "Trainer"


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class User:
    """A row of the ApplicationUsers table.

    email is unique and compared case-sensitively, exactly as stored.
    password is kept in plaintext; nothing in the service hashes it.
    """

    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.USER
    id: str = field(default_factory=_new_id)


@dataclass
class Registration:
    """Input to AuthService.register(). Missing fields arrive as ""."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


@dataclass
class Credentials:
    """Input to AuthService.login()."""

    email: str = ""
    password: str = ""


@dataclass(frozen=True)
class RegistrationOutcome:
    success: bool
    message: str


@dataclass(frozen=True)
class LoginOutcome:
    success: bool
    message: str
    token: str
