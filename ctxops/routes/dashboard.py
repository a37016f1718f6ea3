from __future__ import annotations

from flask import Blueprint, jsonify

from ctxops.auth import api_login_guard
from ctxops.services import get_services
from ctxops.services.dashboard import dashboard_stats

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")

bp.before_request(api_login_guard)


@bp.get("")
def stats():
    services = get_services()
    return jsonify(dashboard_stats(services.gateway, services.ledger))
