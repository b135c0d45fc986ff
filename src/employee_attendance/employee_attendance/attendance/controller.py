from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.auth import current_employee_id, login_required, roles_required
from ..common.datetime_utils import parse_iso_datetime
from ..core.enums import ErrorKind, Role
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok, Result, to_envelope
from ..container import Container
from .commands import (
    AutoCheckInCommand,
    CheckOutCommand,
    CreateAttendanceCommand,
    DeleteAttendanceCommand,
    UpdateAttendanceCommand,
)

logger = logging.getLogger(__name__)


def status_code_for(result: Result) -> int:
    if isinstance(result, Ok):
        return 200
    if result.kind == ErrorKind.NOT_FOUND:
        return 404
    return 400


def respond(result: Result):
    body = to_envelope(result, serialize=_serialize)
    return jsonify(body), status_code_for(result)


def _serialize(data: Any) -> Any:
    if isinstance(data, list):
        return [_serialize(item) for item in data]
    if hasattr(data, "to_dict"):
        return data.to_dict()
    return data


def _int_field(payload: dict, key: str, errors: list[str]) -> int:
    value = payload.get(key)
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f"{key} must be an integer.")
        return 0


def _datetime_field(payload: dict, key: str, errors: list[str]) -> Optional[datetime]:
    try:
        return parse_iso_datetime(payload.get(key))
    except (TypeError, ValueError):
        errors.append(f"{key} is not a valid ISO-8601 timestamp.")
        return None


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def _read_fields(payload: dict) -> dict:
    """Parse the shared create/update body; raises ValidationError on malformed input."""

    errors: list[str] = []
    fields = {
        "employee_id": _int_field(payload, "employeeId", errors),
        "check_in_time": _datetime_field(payload, "checkInTime", errors),
        "check_out_time": _datetime_field(payload, "checkOutTime", errors),
        "status": payload.get("status"),
        "notes": payload.get("notes"),
    }
    if errors:
        raise ValidationError("; ".join(errors))
    return fields


def register(app: Flask, container: Container) -> None:
    dispatcher = container.dispatcher

    @app.route("/api/attendances", methods=["POST"], endpoint="create_attendance")
    @roles_required(Role.ADMIN)
    def create_attendance():
        try:
            payload = _json_body()
            fields = _read_fields(payload)
        except ValidationError as e:
            return respond(Err(kind=ErrorKind.VALIDATION, message=str(e)))

        command = CreateAttendanceCommand(is_auto_check_in=bool(payload.get("isAutoCheckIn", False)), **fields)
        logger.info("Received create attendance request for employee_id=%s", command.employee_id)
        return respond(dispatcher.send(command))

    @app.route("/api/attendances/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @roles_required(Role.ADMIN)
    def update_attendance(attendance_id: int):
        try:
            fields = _read_fields(_json_body())
        except ValidationError as e:
            return respond(Err(kind=ErrorKind.VALIDATION, message=str(e)))

        logger.info("Received update request for attendance id=%s", attendance_id)
        return respond(dispatcher.send(UpdateAttendanceCommand(attendance_id=attendance_id, **fields)))

    @app.route("/api/attendances/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @roles_required(Role.ADMIN)
    def delete_attendance(attendance_id: int):
        logger.info("Received delete request for attendance id=%s", attendance_id)
        return respond(dispatcher.send(DeleteAttendanceCommand(attendance_id=attendance_id)))

    @app.route("/api/attendances/checkout", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        return respond(dispatcher.send(CheckOutCommand(employee_id=current_employee_id())))

    @app.route("/api/attendances/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        return respond(dispatcher.send(AutoCheckInCommand(employee_id=current_employee_id())))
