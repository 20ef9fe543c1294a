# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Credential sanitization and format rules. Pure functions, no I/O."""
import re
import string

from login_gateway.models.domain import Credentials, Invalid, Valid, ValidationResult

# 0x00-0x1F and 0x7F
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,32}")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
PASSWORD_PUNCTUATION = "!@#$%^&*()-_=+[]{};:,.?/~"
_PASSWORD_ALPHABET = frozenset(string.ascii_letters + string.digits + PASSWORD_PUNCTUATION)


def sanitize(value: str) -> str:
    """Drop ASCII control characters, then trim surrounding whitespace."""
    return _CONTROL_CHARS.sub("", value).strip()


def is_valid_username(username: str) -> bool:
    return USERNAME_PATTERN.fullmatch(username) is not None


def is_valid_password(password: str) -> bool:
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        return False
    if any(ch not in _PASSWORD_ALPHABET for ch in password):
        return False
    has_letter = any(ch in string.ascii_letters for ch in password)
    has_digit = any(ch in string.digits for ch in password)
    return has_letter and has_digit


def validate(credentials: Credentials) -> ValidationResult:
    """Sanitize both fields and apply the format rules, username first."""
    username = sanitize(credentials.username)
    password = sanitize(credentials.password)
    if not is_valid_username(username):
        return Invalid(reason="bad username format")
    if not is_valid_password(password):
        return Invalid(reason="bad password format")
    return Valid(credentials=Credentials(username=username, password=password))
