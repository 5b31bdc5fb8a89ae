from flask import Blueprint
from sqlalchemy import text

from . import get_storage

bp = Blueprint("health", __name__)


@bp.get("/healthz")
def healthz():
    """
    Readiness probe: the app is up and the database answers.
    ---
    tags:
      - Health
    responses:
      200:
        description: API and database are up
        schema:
          type: object
          properties:
            status: { type: string, example: ok }
            database: { type: string, example: ok }
    """
    get_storage().get_session().execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}, 200
