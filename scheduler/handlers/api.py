from __future__ import annotations

import logging

from flask import Blueprint, Response, jsonify, request

from ..errors import NotFoundError, StorageError, ValidationError
from ..recurrence import AdvanceError, AdvanceErrorKind
from ..schemas import TaskCreate, TaskUpdate
from ..services.task_service import TaskService
from ..views.formatting import error_payload, task_list_payload, task_payload

log = logging.getLogger(__name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("invalid JSON format")
    return payload


def build_blueprint(service: TaskService) -> Blueprint:
    api = Blueprint("api", __name__, url_prefix="/api")

    @api.errorhandler(ValidationError)
    def validation_failed(exc: ValidationError):
        return jsonify(error_payload(str(exc))), 400

    @api.errorhandler(NotFoundError)
    def not_found(exc: NotFoundError):
        return jsonify(error_payload(str(exc))), 404

    @api.errorhandler(StorageError)
    def storage_failed(exc: StorageError):
        log.exception("storage failure on %s %s", request.method, request.path)
        return jsonify(error_payload(str(exc))), 500

    @api.errorhandler(AdvanceError)
    def advance_failed(exc: AdvanceError):
        if exc.kind is AdvanceErrorKind.INVALID_DATE:
            return jsonify(error_payload(str(exc))), 400
        log.error("next occurrence requested without a rule: %s", exc)
        return jsonify(error_payload(str(exc))), 500

    @api.get("/nextdate")
    def next_date():
        result = service.next_date(
            request.args.get("now", ""),
            request.args.get("date", ""),
            request.args.get("repeat", ""),
        )
        return Response(result, mimetype="text/plain")

    @api.get("/tasks")
    def list_tasks():
        return jsonify(task_list_payload(service.list_tasks()))

    @api.post("/task")
    def create_task():
        task_id = service.create_task(TaskCreate.from_payload(_json_body()))
        return jsonify({"id": str(task_id)})

    @api.get("/task")
    def get_task():
        return jsonify(task_payload(service.get_task(request.args.get("id"))))

    @api.put("/task")
    def update_task():
        service.update_task(TaskUpdate.from_payload(_json_body()))
        return jsonify({})

    @api.post("/task/done")
    def mark_done():
        service.complete_task(request.args.get("id"))
        return jsonify({})

    @api.delete("/task")
    def delete_task():
        service.delete_task(request.args.get("id"))
        return jsonify({})

    return api
