from flask import Blueprint

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    produces:
      - text/plain
    responses:
      200:
        description: Service is healthy
    """
    return "OK", 200, {"Content-Type": "text/plain; charset=utf-8"}
