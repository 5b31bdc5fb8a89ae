"""
Token helpers:
- signed access tokens (JWT, HS256) via PyJWT, validated without any storage lookup
- opaque refresh tokens from the OS CSPRNG; their validity lives in the session store
"""
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone

import jwt

from auth.errors import (
    EntropyFailure,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)

ALGORITHM = "HS256"
ISSUER = "chirpy"
REFRESH_TOKEN_BYTES = 32
REQUIRED_CLAIMS = ["sub", "iat", "exp", "iss"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def issue_access_token(subject_id, signing_secret: str, ttl: timedelta) -> str:
    """Sign a token binding `subject_id` that expires `ttl` from now."""
    # exp is stored in whole seconds
    if ttl < timedelta(seconds=1):
        raise ValueError("ttl must be at least one second")
    issued_at = _now()
    payload = {
        "iss": ISSUER,
        "sub": str(subject_id),
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, signing_secret, algorithm=ALGORITHM)


def validate_access_token(token: str, signing_secret: str) -> str:
    """
    Verify signature, issuer and expiry and return the subject id.

    Raises TokenSignatureInvalid, TokenExpired or TokenMalformed. The
    signature is checked first, so a forged token never reports as expired.
    `now == exp` counts as expired (no leeway).
    """
    try:
        decoded = jwt.decode(
            token,
            signing_secret,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidSignatureError as exc:
        raise TokenSignatureInvalid(str(exc)) from exc
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired(str(exc)) from exc
    except jwt.InvalidTokenError as exc:
        raise TokenMalformed(str(exc)) from exc

    try:
        return str(uuid.UUID(decoded["sub"]))
    except (TypeError, ValueError) as exc:
        raise TokenMalformed("subject is not a valid id") from exc


def generate_refresh_token() -> str:
    """Return 32 random bytes, hex encoded. No structure, no signature."""
    try:
        return secrets.token_hex(REFRESH_TOKEN_BYTES)
    except (NotImplementedError, OSError) as exc:
        raise EntropyFailure("random source unavailable") from exc
