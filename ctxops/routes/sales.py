from __future__ import annotations

from flask import Blueprint, jsonify

from ctxops.auth import api_login_guard
from ctxops.errors import ValidationError
from ctxops.schemas import SALE_DELIVERY_FIELDS, SALE_FIELDS, SALE_ITEM_FIELDS
from ctxops.services import get_services
from ctxops.utils.request_args import json_body
from ctxops.validation import parse_lines, parse_payload

bp = Blueprint("sales", __name__, url_prefix="/api/sales")

bp.before_request(api_login_guard)


@bp.get("")
def list_sales():
    sales = get_services().sales.list_sales()
    return jsonify([sale.to_dict() for sale in sales])


@bp.get("/<int:sale_id>")
def get_sale(sale_id: int):
    return jsonify(get_services().sales.get_sale(sale_id).to_dict())


@bp.get("/<int:sale_id>/items")
def list_sale_items(sale_id: int):
    lines = get_services().sales.sale_lines(sale_id)
    return jsonify([line.to_dict() for line in lines])


@bp.post("")
def create_sale():
    body = json_body()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    header = parse_payload(SALE_FIELDS, body.get("sale"))
    lines = parse_lines(SALE_ITEM_FIELDS, body.get("items"))

    result = get_services().sales.record(header, lines)
    return jsonify(result.to_dict()), 201


@bp.put("/<int:sale_id>")
def update_delivery(sale_id: int):
    changes = parse_payload(SALE_DELIVERY_FIELDS, json_body(), partial=True)
    sale = get_services().sales.update_delivery(sale_id, changes)
    return jsonify(sale.to_dict())
