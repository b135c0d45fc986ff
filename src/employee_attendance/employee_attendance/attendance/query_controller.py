from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import login_required, roles_required
from ..core.constants import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE
from ..core.enums import ErrorKind, Role
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok
from ..container import Container
from .commands import (
    CalculateWorkHoursQuery,
    GetAllAttendanceQuery,
    GetAttendanceByIdQuery,
    GetAttendancesByEmployeeQuery,
)
from .controller import respond, status_code_for


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer.") from None


def _paging() -> tuple[int, int]:
    """Read ``pageNumber``/``pageSize``; range checks happen in the query handlers."""

    errors: list[str] = []
    values: list[int] = []
    for name, default in (("pageNumber", DEFAULT_PAGE_NUMBER), ("pageSize", DEFAULT_PAGE_SIZE)):
        try:
            values.append(_int_arg(name, default))
        except ValidationError as e:
            errors.append(str(e))
    if errors:
        raise ValidationError("; ".join(errors))
    page_number, page_size = values
    return page_number, page_size


def register(app: Flask, container: Container) -> None:
    dispatcher = container.dispatcher

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_attendance():
        try:
            page_number, page_size = _paging()
        except ValidationError as e:
            return respond(Err(kind=ErrorKind.VALIDATION, message=str(e)))
        return respond(dispatcher.send(GetAllAttendanceQuery(page_number=page_number, page_size=page_size)))

    @app.route("/api/attendance/by-employee/<int:employee_id>", methods=["GET"], endpoint="attendance_by_employee")
    @login_required
    def attendance_by_employee(employee_id: int):
        try:
            page_number, page_size = _paging()
        except ValidationError as e:
            return respond(Err(kind=ErrorKind.VALIDATION, message=str(e)))
        query = GetAttendancesByEmployeeQuery(employee_id=employee_id, page_number=page_number, page_size=page_size)
        return respond(dispatcher.send(query))

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_detail")
    @login_required
    def attendance_detail(attendance_id: int):
        return respond(dispatcher.send(GetAttendanceByIdQuery(attendance_id=attendance_id)))

    @app.route("/api/attendance/<int:attendance_id>/work-hours", methods=["GET"], endpoint="attendance_work_hours")
    @login_required
    def attendance_work_hours(attendance_id: int):
        result = dispatcher.send(CalculateWorkHoursQuery(attendance_id=attendance_id))
        if isinstance(result, Ok):
            return jsonify({"attendanceId": attendance_id, "workHours": result.data}), 200
        return jsonify({"message": result.message}), status_code_for(result)
