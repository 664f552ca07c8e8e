"""
FormFlow Validation - Password Policy and Display Text
======================================================

Pure functions over strings and booleans. Nothing here knows about streams;
the derivation graph maps these over its intermediate values.

PasswordStatus priority, first match wins:

1. password empty            -> EMPTY
2. password not strong       -> TOO_WEAK
3. passwords differ          -> MISMATCH
4. otherwise                 -> VALID

Emptiness dominates weakness, which dominates mismatch. So ``""``/``""`` is
EMPTY even though the two fields are equal, and ``"abc"``/``"xyz"`` is
TOO_WEAK rather than MISMATCH.

Lengths are counted in code points.
"""

from enum import Enum
from typing import Dict

MIN_EMAIL_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class PasswordStatus(Enum):
    EMPTY = "empty"
    TOO_WEAK = "too_weak"
    MISMATCH = "mismatch"
    VALID = "valid"


STATUS_MESSAGES: Dict[PasswordStatus, str] = {
    PasswordStatus.EMPTY: "Password is empty",
    PasswordStatus.TOO_WEAK: "Please pick a strong password",
    PasswordStatus.MISMATCH: "Passwords don't match",
    PasswordStatus.VALID: "",
}


def status_message(status: PasswordStatus) -> str:
    """Display text for ``status``; empty for VALID."""
    return STATUS_MESSAGES[status]


def is_email_valid(email: str) -> bool:
    return len(email) >= MIN_EMAIL_LENGTH


def is_password_strong(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def is_password_empty(password: str) -> bool:
    return password == ""


def passwords_match(password: str, repeat_password: str) -> bool:
    return password == repeat_password


def evaluate_password_status(is_empty: bool, is_strong: bool, are_equal: bool) -> PasswordStatus:
    if is_empty:
        return PasswordStatus.EMPTY
    if not is_strong:
        return PasswordStatus.TOO_WEAK
    if not are_equal:
        return PasswordStatus.MISMATCH
    return PasswordStatus.VALID


def is_form_submittable(status: PasswordStatus, email_valid: bool) -> bool:
    return status is PasswordStatus.VALID and email_valid is True
