"""
Field validation for user and hoax input.

Every validator is a pure function returning an ordered ``dict`` of
``field -> message key``. Only the first failing rule of a field is kept,
and every failing field is reported. Services compose these before writing.
"""
from __future__ import annotations

import re
from typing import Callable

import email_validator
from email_validator import EmailNotValidError, validate_email

USERNAME_MIN, USERNAME_MAX = 4, 32
PASSWORD_MIN = 6
HOAX_MIN, HOAX_MAX = 10, 5000

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).*$")

# only the address shape is checked; .local, .test and other reserved names pass
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


def _blank(value: str | None) -> bool:
    return value is None or value == ""


def check_username(username: str | None) -> str | None:
    if _blank(username):
        return "username_null"
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        return "username_size"
    return None


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_email(email: str | None, email_taken: Callable[[str], bool] | None = None) -> str | None:
    if _blank(email):
        return "email_null"
    if not is_valid_email(email):
        return "email_invalid"
    if email_taken is not None and email_taken(email):
        return "email_in_use"
    return None


def check_password(password: str | None) -> str | None:
    if _blank(password):
        return "password_null"
    if len(password) < PASSWORD_MIN:
        return "password_size"
    if not _PASSWORD_PATTERN.match(password):
        return "password_pattern"
    return None


def _collect(checks) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field, key in checks:
        if key:
            errors[field] = key
    return errors


def validate_registration(
    username: str | None,
    email: str | None,
    password: str | None,
    email_taken: Callable[[str], bool] | None = None,
) -> dict[str, str]:
    return _collect([
        ("username", check_username(username)),
        ("email", check_email(email, email_taken)),
        ("password", check_password(password)),
    ])


def validate_password(password: str | None) -> dict[str, str]:
    return _collect([("password", check_password(password))])


def validate_hoax_content(content: str | None) -> dict[str, str]:
    if _blank(content) or not HOAX_MIN <= len(content) <= HOAX_MAX:
        return {"content": "hoax_content_size"}
    return {}
