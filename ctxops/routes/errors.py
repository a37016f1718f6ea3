from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from ctxops.errors import CtxOpsError
from ctxops.extensions import db

bp = Blueprint("errors", __name__)


@bp.app_errorhandler(CtxOpsError)
def handle_domain_error(error: CtxOpsError):
    db.session.rollback()
    if error.status_code >= 500:
        current_app.logger.error("%s %s failed: %s", request.method, request.path, error)
    else:
        current_app.logger.info(
            "%s %s rejected (%s): %s",
            request.method,
            request.path,
            error.status_code,
            error.message,
        )
    return jsonify(error.to_dict()), error.status_code


@bp.app_errorhandler(IntegrityError)
def handle_integrity_error(error: IntegrityError):
    db.session.rollback()
    root_error = getattr(error, "orig", None) or error
    # Driver text stays in the log; it names tables and columns.
    current_app.logger.warning("Constraint violation on %s: %s", request.path, root_error)
    return (
        jsonify(
            {"error": "The record conflicts with existing data or is missing a required value."}
        ),
        400,
    )


@bp.app_errorhandler(Exception)
def handle_exception(error: Exception):
    # Allow HTTP errors that are not 500 to keep their status code.
    if isinstance(error, HTTPException) and error.code != 500:
        return jsonify({"error": error.description or error.name}), error.code

    db.session.rollback()
    current_app.logger.exception("Unhandled exception", exc_info=error)

    error_message = "Internal Server Error"
    if isinstance(error, HTTPException) and error.description:
        error_message = error.description
    elif current_app.debug:
        error_message = str(error) or error_message
    return jsonify({"error": error_message}), 500
