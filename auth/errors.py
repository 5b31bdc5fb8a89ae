"""
Authentication error kinds.

Every failure has its own class so logs can say exactly what went wrong.
The HTTP boundary (api.errors) collapses them into a handful of generic
responses; callers never learn which kind was raised.
"""


class AuthError(Exception):
    """Base class for every auth failure."""


class HashingFailure(AuthError):
    """Password hashing could not be performed (internal, never user input)."""


class CredentialMismatch(AuthError):
    """Unknown email or wrong password."""


class TokenError(AuthError):
    """Access token was rejected."""


class TokenMalformed(TokenError):
    pass


class TokenSignatureInvalid(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class MissingOrMalformedHeader(AuthError):
    """Authorization header is absent or is not `Bearer <token>`."""


class RefreshTokenRejected(AuthError):
    """Refresh token is unknown, revoked or expired."""


class EntropyFailure(AuthError):
    """The OS random source is unavailable."""
