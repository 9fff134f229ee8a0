"""Public liveness endpoint for probes. Does not touch the database."""

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from flask_apispec import doc

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
@doc(
    description="Public liveness endpoint.",
    tags=["Health"],
    responses={200: {"description": "Service is healthy"}},
)
def healthz() -> tuple[Response, int]:
    return jsonify({"status": "ok"}), 200
