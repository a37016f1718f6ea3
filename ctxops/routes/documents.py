from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request

from ctxops.auth import api_login_guard, current_user_id
from ctxops.errors import ValidationError
from ctxops.models import Document
from ctxops.schemas import DOCUMENT_FIELDS
from ctxops.services import get_services
from ctxops.utils.request_args import int_arg, json_body
from ctxops.validation import parse_payload

bp = Blueprint("documents", __name__, url_prefix="/api/documents")

bp.before_request(api_login_guard)


@bp.post("")
def create_document():
    values = parse_payload(DOCUMENT_FIELDS, json_body())
    values["uploaded_by"] = current_user_id()
    values["upload_date"] = datetime.utcnow()
    gateway = get_services().gateway
    with gateway.atomic():
        document = gateway.documents.create(**values)
    return jsonify(document.to_dict()), 201


@bp.get("")
def list_documents():
    related_id = int_arg("relatedId")
    related_type = (request.args.get("relatedType") or "").strip()
    if not related_id or not related_type:
        raise ValidationError("relatedId and relatedType are required")

    documents = get_services().gateway.documents.list(
        Document.related_id == related_id,
        Document.related_type == related_type,
    )
    return jsonify([document.to_dict() for document in documents])
