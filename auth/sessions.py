"""
Session lifecycle: one access token plus one stored refresh token per login.

Refresh tokens are opaque; whether one is still usable is decided by the
session store at lookup time (exists, not revoked, not expired). Access
tokens are never looked up, so revoking a refresh token does not cut short
the access tokens already minted from it. Keep ACCESS_TOKEN_EXPIRES short.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from auth.errors import CredentialMismatch, HashingFailure, RefreshTokenRejected
from auth.passwords import hash_password, verify_password
from auth.tokens import generate_refresh_token, issue_access_token

log = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("chirpy-no-such-user")


class SessionStore(Protocol):
    def find_user_by_email(self, email: str):
        ...

    def create_refresh_token(self, token: str, user_id: str, expires_at: datetime) -> None:
        ...

    def resolve_user_by_refresh_token(self, token: str):
        ...

    def revoke_refresh_token(self, token: str) -> None:
        ...


@dataclass(frozen=True)
class IssuedAccessToken:
    access_token: str
    expires_in: int


@dataclass(frozen=True)
class IssuedSession:
    user: object
    access_token: str
    refresh_token: str
    expires_in: int


class SessionManager:
    def __init__(
        self,
        store: SessionStore,
        signing_secret: str,
        access_ttl: timedelta = timedelta(hours=1),
        max_access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=60),
    ):
        self.store = store
        self.signing_secret = signing_secret
        self.access_ttl = access_ttl
        self.max_access_ttl = max_access_ttl
        self.refresh_ttl = refresh_ttl

    def access_ttl_for(self, requested_seconds: Optional[int] = None) -> timedelta:
        """None or 0 means the default; anything longer than the max is clamped."""
        if not requested_seconds:
            return self.access_ttl
        if requested_seconds < 0:
            raise ValueError("expires_in_seconds must not be negative")
        if requested_seconds >= self.max_access_ttl.total_seconds():
            return self.max_access_ttl
        return timedelta(seconds=requested_seconds)

    def _access_token(self, user_id: str, ttl: timedelta) -> IssuedAccessToken:
        token = issue_access_token(user_id, self.signing_secret, ttl)
        return IssuedAccessToken(access_token=token, expires_in=int(ttl.total_seconds()))

    def start(self, user, requested_seconds: Optional[int] = None) -> IssuedSession:
        """Issue an access token and persist a fresh refresh token for `user`."""
        access = self._access_token(user.id, self.access_ttl_for(requested_seconds))
        refresh_token = generate_refresh_token()
        self.store.create_refresh_token(
            refresh_token,
            user.id,
            datetime.now(timezone.utc) + self.refresh_ttl,
        )
        log.info("session started for user %s", user.id)
        return IssuedSession(
            user=user,
            access_token=access.access_token,
            refresh_token=refresh_token,
            expires_in=access.expires_in,
        )

    def login(self, email: str, password: str, requested_seconds: Optional[int] = None) -> IssuedSession:
        """Unknown email and wrong password both raise CredentialMismatch."""
        user = self.store.find_user_by_email(email)
        if user is None:
            # unknown emails pay the same argon2 cost as known ones
            verify_password(password, _dummy_hash())
            raise CredentialMismatch("no user for email")
        try:
            ok = verify_password(password, user.password_hash)
        except HashingFailure:
            log.error("unparsable password hash for user %s", user.id)
            ok = False
        if not ok:
            raise CredentialMismatch("password mismatch")
        return self.start(user, requested_seconds)

    def refresh(self, refresh_token: str) -> IssuedAccessToken:
        """Mint a new access token; the refresh token itself is not rotated."""
        user = self.store.resolve_user_by_refresh_token(refresh_token)
        if user is None:
            raise RefreshTokenRejected("refresh token unknown, revoked or expired")
        return self._access_token(user.id, self.access_ttl)

    def revoke(self, refresh_token: str) -> None:
        # Unknown and already revoked tokens are accepted silently.
        self.store.revoke_refresh_token(refresh_token)
