from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from auth.decorators import access_token_required
from auth.passwords import hash_password
from models.schemas.user import UserCreateSchema, UserOutSchema

from . import get_storage

bp = Blueprint("users", __name__)

user_update_schema = UserCreateSchema()
user_out_schema = UserOutSchema()


@bp.get("/users/me")
@access_token_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: The token's user no longer exists
    """
    user = get_storage().get_user(g.current_user_id)
    if not user:
        abort(404)
    return jsonify(
        {
            "data": user_out_schema.dump(user)
        }
    ), 200


@bp.put("/users")
@access_token_required()
def update_credentials():
    """
    Replace email and password of the current user.
    ---
    tags:
      - Users
    security:
      - Bearer: []
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
      200:
        description: Updated
      401:
        description: Unauthorized
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    storage = get_storage()
    other = storage.find_user_by_email(data["email"])
    if other and other.id != g.current_user_id:
        abort(409, description="Email already registered")

    user = storage.update_credentials(g.current_user_id, data["email"], hash_password(data["password"]))
    if not user:
        abort(404)
    return jsonify(
        {
            "data": user_out_schema.dump(user)
        }
    ), 200
