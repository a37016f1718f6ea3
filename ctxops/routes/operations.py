"""Projects, tasks, item usage and timesheets."""

from __future__ import annotations

from flask import Blueprint, jsonify

from ctxops.auth import api_login_guard, current_user_id
from ctxops.models import Task, Timesheet
from ctxops.schemas import (
    ITEM_USAGE_FIELDS,
    PROJECT_FIELDS,
    TASK_FIELDS,
    TASK_STATUS_FIELDS,
    TIMESHEET_FIELDS,
)
from ctxops.services import get_services
from ctxops.utils.request_args import int_arg, json_body
from ctxops.validation import parse_payload

bp = Blueprint("operations", __name__, url_prefix="/api")

bp.before_request(api_login_guard)


@bp.get("/projects")
def list_projects():
    projects = get_services().gateway.projects.list()
    return jsonify([project.to_dict() for project in projects])


@bp.get("/projects/<int:project_id>")
def get_project(project_id: int):
    return jsonify(get_services().gateway.projects.require(project_id).to_dict())


@bp.post("/projects")
def create_project():
    values = parse_payload(PROJECT_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        project = gateway.projects.create(**values)
    return jsonify(project.to_dict()), 201


@bp.get("/projects/<int:project_id>/tasks")
def list_tasks(project_id: int):
    tasks = get_services().gateway.tasks.list(Task.project_id == project_id)
    return jsonify([task.to_dict() for task in tasks])


@bp.post("/projects/<int:project_id>/tasks")
def create_task(project_id: int):
    values = parse_payload(TASK_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        gateway.projects.require(project_id)
        task = gateway.tasks.create(project_id=project_id, **values)
    return jsonify(task.to_dict()), 201


@bp.put("/tasks/<int:task_id>/status")
def update_task_status(task_id: int):
    changes = parse_payload(TASK_STATUS_FIELDS, json_body())
    gateway = get_services().gateway
    with gateway.atomic():
        task = gateway.tasks.update(task_id, changes)
    return jsonify(task.to_dict())


@bp.get("/itemusage")
def list_item_usage():
    usage = get_services().usage.list_usage(int_arg("inventoryId"))
    return jsonify([entry.to_dict() for entry in usage])


@bp.post("/itemusage")
def record_item_usage():
    values = parse_payload(ITEM_USAGE_FIELDS, json_body())
    values["recorded_by"] = current_user_id()
    result = get_services().usage.record(values)
    return jsonify(result.to_dict()), 201


@bp.get("/timesheet")
def list_timesheets():
    entries = get_services().gateway.timesheets.list(
        Timesheet.user_id == current_user_id(),
        order_by=Timesheet.work_date.desc(),
    )
    return jsonify([entry.to_dict() for entry in entries])


@bp.post("/timesheet")
def record_timesheet():
    values = parse_payload(TIMESHEET_FIELDS, json_body())
    values["user_id"] = current_user_id()
    gateway = get_services().gateway
    with gateway.atomic():
        entry = gateway.timesheets.create(**values)
    return jsonify(entry.to_dict()), 201
