"""Password hashing and access token helpers.

Nothing here keeps state: every function works on the values passed to it.
"""

from __future__ import annotations

import re
import time
from typing import Any

import bcrypt
import jwt

from .errors import InvalidTokenError, ModelValidationError, TokenExpiredError

BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes of a secret.
BCRYPT_MAX_BYTES = 72
JWT_ALGORITHM = "HS256"

# Symbol set enforced by the persistence layer. Broader than the one the
# request schema accepts; see schemas.PASSWORD_PATTERN.
STORE_PASSWORD_SYMBOLS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
STORE_PASSWORD_MIN_LENGTH = 6
STORE_PASSWORD_MESSAGE = (
    "Password must contain at least one letter and one number and one special character."
)


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash for *password*."""

    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify *password* against the stored hash."""

    if not password or not stored_hash:
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(password), stored_hash.encode("utf-8"))
    except ValueError:
        return False


def check_password_strength(password: str) -> str:
    """Apply the store-level complexity rule and return the trimmed password to hash."""

    password = (password or "").strip()
    if len(password) < STORE_PASSWORD_MIN_LENGTH:
        raise ModelValidationError(
            f"Password must be at least {STORE_PASSWORD_MIN_LENGTH} characters long."
        )
    has_letter = re.search(r"[a-zA-Z]", password) is not None
    has_digit = re.search(r"\d", password) is not None
    has_symbol = STORE_PASSWORD_SYMBOLS.search(password) is not None
    if not (has_letter and has_digit and has_symbol):
        raise ModelValidationError(STORE_PASSWORD_MESSAGE)
    return password


def issue_token(claims: dict[str, Any], secret: str, ttl_seconds: int) -> str:
    """Return a signed token carrying *claims* that expires after *ttl_seconds*."""

    issued_at = int(time.time())
    payload = dict(claims)
    payload.update({"iat": issued_at, "exp": issued_at + ttl_seconds})
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def parse_token(token: str, secret: str) -> dict[str, Any]:
    """Decode *token*, raising ``TokenExpiredError`` or ``InvalidTokenError``."""

    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError() from exc
