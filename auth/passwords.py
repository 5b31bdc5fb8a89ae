"""
Password hashing via argon2-cffi (Argon2id, random salt per hash).
"""
from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from auth.errors import HashingFailure

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    try:
        return ph.hash(password)
    except HashingError as exc:
        raise HashingFailure(str(exc)) from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash.

    A hash that parses but does not match (including a corrupted digest) is
    a plain False. A string that is not an Argon2 hash at all raises
    HashingFailure.
    """
    try:
        return ph.verify(password_hash, password)
    except VerificationError:
        return False
    except InvalidHashError as exc:
        raise HashingFailure("stored password hash cannot be parsed") from exc
