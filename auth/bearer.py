from __future__ import annotations

from typing import Optional

from auth.errors import MissingOrMalformedHeader

PREFIX = "bearer "


def extract_bearer_token(header_value: Optional[str]) -> str:
    """Return what follows `Bearer ` (scheme matched case-insensitively).

    The token itself is not inspected.
    """
    if not header_value or len(header_value) <= len(PREFIX):
        raise MissingOrMalformedHeader("Missing or invalid Authorization header")
    if header_value[: len(PREFIX)].lower() != PREFIX:
        raise MissingOrMalformedHeader("Missing or invalid Authorization header")
    return header_value[len(PREFIX):]
