from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ctxops.extensions import db

bp = Blueprint("health", __name__, url_prefix="/health")


@bp.get("")
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning("Health check could not reach the database: %s", exc)
        payload = {"status": "degraded", "database": False}
        if current_app.config.get("DATABASE_ERROR"):
            payload["error"] = current_app.config["DATABASE_ERROR"]
        return jsonify(payload), 503
    return jsonify({"status": "ok", "database": True})
