"""Unit tests for auth/validators.py -- registration, login and password rules.

Covers:
- each password-strength predicate fails independently on its own input
- several violations are reported together, in rule order
- registration and login rule sets, including the malformed-email case
"""

import pytest

from auth.models import Credentials, Registration
from auth.validators import is_valid_email, validate_login, validate_password, validate_registration

LENGTH = "Password must be at least 10 characters long."
UPPER = "Password must contain at least one uppercase letter."
LOWER = "Password must contain at least one lowercase letter."
DIGIT = "Password must contain at least one digit."
SPECIAL = "Password must contain at least one special character."


class TestPasswordStrength:
    @pytest.mark.parametrize(
        "password, expected",
        [
            ("short1A!", LENGTH),
            ("alllowercase123!", UPPER),
            ("ALLUPPER123!", LOWER),
            ("NoDigitsHere!", DIGIT),
            ("NoSpecial1234A", SPECIAL),
        ],
    )
    def test_single_rule_violation(self, password: str, expected: str) -> None:
        assert validate_password(password) == [expected]

    def test_strong_password_passes(self) -> None:
        assert validate_password("ValidPass123!") == []

    def test_every_special_character_is_accepted(self) -> None:
        for char in "@$!%*?&":
            assert validate_password(f"Abcdefgh12{char}") == [], char

    def test_other_punctuation_is_not_special(self) -> None:
        assert validate_password("Abcdefgh12#") == [SPECIAL]

    def test_empty_password_reports_all_rules_in_order(self) -> None:
        assert validate_password("") == [LENGTH, UPPER, LOWER, DIGIT, SPECIAL]


class TestRegistrationRules:
    def _registration(self, **overrides) -> Registration:
        fields = {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "password": "secret",
            "confirm_password": "secret",
        }
        fields.update(overrides)
        return Registration(**fields)

    def test_valid_registration(self) -> None:
        # Strength is not part of the registration rules.
        assert validate_registration(self._registration()) == []

    def test_blank_names(self) -> None:
        errors = validate_registration(self._registration(first_name="", last_name="  "))
        assert errors == ["First name is required.", "Last name is required."]

    def test_empty_email_is_missing_and_malformed(self) -> None:
        errors = validate_registration(self._registration(email=""))
        assert errors == ["Email is required.", "A valid email is required."]

    def test_malformed_email(self) -> None:
        assert validate_registration(self._registration(email="not-an-email")) == ["A valid email is required."]

    def test_whitespace_password_is_missing(self) -> None:
        errors = validate_registration(self._registration(password="   ", confirm_password="   "))
        assert errors == ["Password is required."]

    def test_confirm_password_mismatch(self) -> None:
        errors = validate_registration(self._registration(confirm_password="other"))
        assert errors == ["Passwords must match."]

    def test_empty_input_collects_every_message(self) -> None:
        errors = validate_registration(Registration())
        assert errors == [
            "First name is required.",
            "Last name is required.",
            "Email is required.",
            "A valid email is required.",
            "Password is required.",
        ]


class TestLoginRules:
    def test_valid_login(self) -> None:
        assert validate_login(Credentials(email="ada@example.com", password="x")) == []

    def test_missing_password(self) -> None:
        assert validate_login(Credentials(email="ada@example.com")) == ["Password is required."]

    def test_whitespace_password_is_missing(self) -> None:
        assert validate_login(Credentials(email="ada@example.com", password=" \t")) == ["Password is required."]

    def test_single_label_host_is_accepted(self) -> None:
        assert validate_login(Credentials(email="ada@mailhost", password="x")) == []

    def test_bad_email_and_missing_password(self) -> None:
        errors = validate_login(Credentials(email="ada"))
        assert errors == ["A valid email is required.", "Password is required."]


@pytest.mark.parametrize(
    "email, valid",
    [
        ("ada@example.com", True),
        ("first.last+tag@sub.example.org", True),
        ("ada@mailhost", True),
        ("@example.com", False),
        ("ada@@example.com", False),
        ("ada lovelace@example.com", False),
    ],
)
def test_email_format(email: str, valid: bool) -> None:
    assert is_valid_email(email) is valid
