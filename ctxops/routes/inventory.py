from __future__ import annotations

from flask import Blueprint, jsonify

from ctxops.auth import api_login_guard
from ctxops.errors import NotFoundError, ValidationError
from ctxops.schemas import (
    INVENTORY_FIELDS,
    TRANSFER_FIELDS,
    TRANSFER_ITEM_FIELDS,
    WAREHOUSE_FIELDS,
)
from ctxops.services import get_services
from ctxops.services.stock_transfer import TransferHeader, TransferLineRequest
from ctxops.utils.request_args import bool_arg, int_arg, json_body
from ctxops.validation import parse_lines, parse_payload

bp = Blueprint("inventory", __name__, url_prefix="/api")

bp.before_request(api_login_guard)


@bp.get("/inventory")
def list_inventory():
    ledger = get_services().ledger
    warehouse_id = int_arg("warehouseId")
    if bool_arg("lowStock"):
        items = ledger.list_low_stock(warehouse_id)
    else:
        items = ledger.list_items(warehouse_id)
    return jsonify([item.to_dict() for item in items])


@bp.get("/inventory/<int:item_id>")
def get_inventory_item(item_id: int):
    return jsonify(get_services().ledger.get_item(item_id).to_dict())


@bp.post("/inventory")
def create_inventory_item():
    values = parse_payload(INVENTORY_FIELDS, json_body())
    services = get_services()
    with services.gateway.atomic():
        item = services.ledger.create_item(values)
    return jsonify(item.to_dict()), 201


@bp.put("/inventory/<int:item_id>")
def update_inventory_item(item_id: int):
    changes = parse_payload(INVENTORY_FIELDS, json_body(), partial=True)
    services = get_services()
    with services.gateway.atomic():
        item = services.ledger.update_item(item_id, changes)
    return jsonify(item.to_dict())


@bp.delete("/inventory/<int:item_id>")
def delete_inventory_item(item_id: int):
    services = get_services()
    with services.gateway.atomic():
        deleted = services.ledger.delete_item(item_id)
    if not deleted:
        raise NotFoundError("Inventory item", item_id)
    return "", 204


@bp.get("/warehouses")
def list_warehouses():
    warehouses = get_services().gateway.warehouses.list()
    return jsonify([warehouse.to_dict() for warehouse in warehouses])


@bp.post("/warehouses")
def create_warehouse():
    values = parse_payload(WAREHOUSE_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        warehouse = gateway.warehouses.create(**values)
    return jsonify(warehouse.to_dict()), 201


@bp.get("/inventory/transfers")
def list_transfers():
    transfers = get_services().transfers.list_transfers()
    return jsonify([transfer.to_dict() for transfer in transfers])


@bp.get("/inventory/transfers/<int:transfer_id>/items")
def list_transfer_items(transfer_id: int):
    lines = get_services().transfers.transfer_lines(transfer_id)
    return jsonify([line.to_dict() for line in lines])


@bp.post("/inventory/transfers")
def create_transfer():
    body = json_body()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    header = TransferHeader(**parse_payload(TRANSFER_FIELDS, body.get("transfer")))
    lines = [
        TransferLineRequest(**line)
        for line in parse_lines(TRANSFER_ITEM_FIELDS, body.get("items"))
    ]

    result = get_services().transfers.execute(header, lines)
    return jsonify(result.to_dict()), 201
