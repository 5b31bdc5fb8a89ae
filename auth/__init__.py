"""
Authentication core: password hashing, access tokens, refresh tokens,
bearer header parsing and the session lifecycle built on them.
"""
from auth.bearer import extract_bearer_token
from auth.passwords import hash_password, verify_password
from auth.sessions import IssuedAccessToken, IssuedSession, SessionManager, SessionStore
from auth.tokens import generate_refresh_token, issue_access_token, validate_access_token

__all__ = [
    "extract_bearer_token",
    "hash_password",
    "verify_password",
    "issue_access_token",
    "validate_access_token",
    "generate_refresh_token",
    "SessionManager",
    "SessionStore",
    "IssuedSession",
    "IssuedAccessToken",
]
