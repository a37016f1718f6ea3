from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_user, logout_user

from ctxops.errors import ValidationError
from ctxops.models import User
from ctxops.schemas import CREDENTIAL_FIELDS
from ctxops.services import get_services
from ctxops.utils.request_args import json_body
from ctxops.validation import parse_payload

bp = Blueprint("auth", __name__, url_prefix="/api")


@bp.post("/register")
def register():
    credentials = parse_payload(CREDENTIAL_FIELDS, json_body())
    gateway = get_services().gateway
    if gateway.users.first(User.username == credentials["username"]) is not None:
        raise ValidationError("Username already exists")

    with gateway.atomic():
        user = User(username=credentials["username"])
        user.set_password(credentials["password"])
        gateway.session.add(user)

    login_user(user)
    current_app.logger.info("Registered user %s", user.username)
    return jsonify(user.to_dict()), 201


@bp.post("/login")
def login():
    credentials = parse_payload(CREDENTIAL_FIELDS, json_body())
    user = get_services().gateway.users.first(User.username == credentials["username"])
    if user is None or not user.check_password(credentials["password"]):
        current_app.logger.warning("Failed login for %s", credentials["username"])
        return jsonify({"error": "Invalid username or password"}), 401

    login_user(user)
    return jsonify(user.to_dict())


@bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"status": "ok"})


@bp.get("/user")
def whoami():
    if not current_user.is_authenticated:
        return jsonify({"error": "Unauthorized"}), 401
    return jsonify(current_user.to_dict())
