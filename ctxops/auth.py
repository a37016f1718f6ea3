from __future__ import annotations

from flask import jsonify
from flask_login import current_user


def api_login_guard():
    """``before_request`` handler answering 401 for anonymous API callers."""

    if not current_user.is_authenticated:
        return jsonify({"error": "Unauthorized"}), 401
    return None


def current_user_id() -> int:
    return int(current_user.get_id())
