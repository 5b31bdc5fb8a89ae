from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from auth.bearer import extract_bearer_token
from auth.tokens import validate_access_token


def access_token_required():
    """
    Require a valid access token in `Authorization: Bearer <token>`.
    Validation is stateless: the user is not loaded here, only
    g.current_user_id is set. Failures raise auth errors that the app's
    error handlers turn into a plain 401.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_bearer_token(request.headers.get("Authorization"))
            g.current_user_id = validate_access_token(token, current_app.config["JWT_SECRET"])
            return fn(*args, **kwargs)

        return wrapper

    return decorator
