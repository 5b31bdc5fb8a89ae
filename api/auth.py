"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh   (Authorization: Bearer <refresh token>)
- POST /auth/revoke    (Authorization: Bearer <refresh token>)

The implementation:
- Uses argon2 for password hashing (via auth.passwords)
- Issues short-lived access tokens (JWTs signed with HS256) and opaque refresh tokens
- Stores refresh tokens in DB (RefreshToken model) so they can be revoked
- Refresh does not rotate the refresh token
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from auth.bearer import extract_bearer_token
from auth.passwords import hash_password
from models.schemas.user import UserCreateSchema, UserOutSchema, UserLoginSchema

from . import get_sessions, get_storage

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()


def session_response(issued, status: int):
    return jsonify(
        {
            "data": user_out_schema.dump(issued.user),
            "access_token": issued.access_token,
            "refresh_token": issued.refresh_token,
            "token_type": "bearer",
            "expires_in": issued.expires_in,
        }
    ), status


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created (returns user and tokens)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    storage = get_storage()
    if storage.find_user_by_email(data["email"]):
        abort(409, description="Email already registered")

    user = storage.create_user(data["email"], hash_password(data["password"]))
    return session_response(get_sessions().start(user), 201)


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
             expires_in_seconds: { type: integer, description: "0 or absent for the default; capped at the maximum" }
    responses:
      200:
        description: OK (returns user and tokens)
      401:
        description: Incorrect email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)
    issued = get_sessions().login(data["email"], data["password"], data.get("expires_in_seconds"))
    return session_response(issued, 200)


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns access_token)
      401:
        description: Unauthorized
    """
    refresh_token = extract_bearer_token(request.headers.get("Authorization"))
    issued = get_sessions().refresh(refresh_token)
    return jsonify(
        {
            "access_token": issued.access_token,
            "token_type": "bearer",
            "expires_in": issued.expires_in,
        }
    ), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token. Unknown or already revoked tokens also return 204.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Missing or malformed Authorization header
    """
    refresh_token = extract_bearer_token(request.headers.get("Authorization"))
    get_sessions().revoke(refresh_token)
    return ("", 204)
