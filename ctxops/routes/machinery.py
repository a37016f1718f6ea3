from __future__ import annotations

from flask import Blueprint, jsonify

from ctxops.auth import api_login_guard
from ctxops.errors import NotFoundError
from ctxops.models import MachineryService
from ctxops.schemas import MACHINERY_FIELDS, MACHINERY_SERVICE_FIELDS
from ctxops.services import get_services
from ctxops.utils.request_args import json_body
from ctxops.validation import parse_payload

bp = Blueprint("machinery", __name__, url_prefix="/api/machinery")

bp.before_request(api_login_guard)


@bp.get("")
def list_machinery():
    machinery = get_services().gateway.machinery.list()
    return jsonify([machine.to_dict() for machine in machinery])


@bp.get("/<int:machinery_id>")
def get_machinery(machinery_id: int):
    return jsonify(get_services().gateway.machinery.require(machinery_id).to_dict())


@bp.post("")
def create_machinery():
    values = parse_payload(MACHINERY_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        machine = gateway.machinery.create(**values)
    return jsonify(machine.to_dict()), 201


@bp.put("/<int:machinery_id>")
def update_machinery(machinery_id: int):
    changes = parse_payload(MACHINERY_FIELDS, json_body(), partial=True)
    gateway = get_services().gateway
    with gateway.atomic():
        machine = gateway.machinery.update(machinery_id, changes)
    return jsonify(machine.to_dict())


@bp.delete("/<int:machinery_id>")
def delete_machinery(machinery_id: int):
    gateway = get_services().gateway
    with gateway.atomic():
        deleted = gateway.machinery.delete(machinery_id)
    if not deleted:
        raise NotFoundError("Machinery", machinery_id)
    return "", 204


@bp.get("/<int:machinery_id>/services")
def list_services(machinery_id: int):
    services = get_services().gateway.machinery_services.list(
        MachineryService.machinery_id == machinery_id,
        order_by=MachineryService.service_date,
    )
    return jsonify([service.to_dict() for service in services])


@bp.post("/<int:machinery_id>/services")
def create_service(machinery_id: int):
    values = parse_payload(MACHINERY_SERVICE_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        gateway.machinery.require(machinery_id)
        service = gateway.machinery_services.create(machinery_id=machinery_id, **values)
    return jsonify(service.to_dict()), 201
