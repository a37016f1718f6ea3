"""Purchase orders and their line items."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from ctxops.auth import api_login_guard
from ctxops.errors import NotFoundError, ValidationError
from ctxops.schemas import PURCHASE_FIELDS, PURCHASE_ITEM_FIELDS
from ctxops.services import get_services
from ctxops.utils.request_args import json_body
from ctxops.validation import parse_lines, parse_payload

bp = Blueprint("purchasing", __name__, url_prefix="/api/purchases")

bp.before_request(api_login_guard)


@bp.get("")
def list_purchases():
    purchase_type = (request.args.get("type") or "").strip() or None
    purchases = get_services().purchases.list_purchases(purchase_type)
    return jsonify([purchase.to_dict() for purchase in purchases])


@bp.get("/<int:purchase_id>")
def get_purchase(purchase_id: int):
    return jsonify(get_services().purchases.get_purchase(purchase_id).to_dict())


@bp.get("/<int:purchase_id>/items")
def list_purchase_items(purchase_id: int):
    items = get_services().purchases.purchase_items(purchase_id)
    return jsonify([item.to_dict() for item in items])


@bp.post("")
def create_purchase():
    body = json_body()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    values = parse_payload(PURCHASE_FIELDS, body.get("purchase"))
    items = parse_lines(PURCHASE_ITEM_FIELDS, body.get("items", []))

    purchase = get_services().purchases.create(values, items)
    return jsonify(purchase.to_dict()), 201


@bp.put("/<int:purchase_id>")
def update_purchase(purchase_id: int):
    changes = parse_payload(PURCHASE_FIELDS, json_body(), partial=True)
    purchase = get_services().purchases.update(purchase_id, changes)
    return jsonify(purchase.to_dict())


@bp.delete("/<int:purchase_id>")
def delete_purchase(purchase_id: int):
    if not get_services().purchases.delete(purchase_id):
        raise NotFoundError("Purchase", purchase_id)
    return "", 204
