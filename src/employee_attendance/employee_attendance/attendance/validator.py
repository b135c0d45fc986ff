"""Attendance validation rules.

Every rule runs independently and failures are accumulated, so a caller
sees all problems with a command at once. Data checks go through the
repository protocols; the clock is passed in by the handler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import day_bounds
from ..core.constants import NOTES_MAX_LENGTH
from ..core.enums import AttendanceStatus, ErrorKind
from ..core.result import Err
from ..employees.repository import EmployeeRepository
from .commands import CreateAttendanceCommand, DeleteAttendanceCommand, UpdateAttendanceCommand
from .repository import AttendanceRepository

ATTENDANCE_NOT_FOUND = "Attendance record not found."
EMPLOYEE_NOT_FOUND = "Employee not found."
INVALID_STATUS = "Invalid status. Valid values: " + ", ".join(AttendanceStatus.values()) + "."


@dataclass(frozen=True)
class ValidationFailure:
    message: str
    not_found: bool = False


@dataclass
class ValidationResult:
    failures: list[ValidationFailure] = field(default_factory=list)

    def add(self, message: str, *, not_found: bool = False) -> None:
        self.failures.append(ValidationFailure(message=message, not_found=not_found))

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]

    @property
    def message(self) -> str:
        return "; ".join(self.messages)

    def to_err(self) -> Err:
        kind = ErrorKind.NOT_FOUND if any(f.not_found for f in self.failures) else ErrorKind.VALIDATION
        return Err(kind=kind, message=self.message)


class AttendanceValidator:
    def __init__(self, employees: EmployeeRepository, attendance: AttendanceRepository, *, now: datetime):
        self._employees = employees
        self._attendance = attendance
        self._now = now

    def validate_create(self, command: CreateAttendanceCommand) -> ValidationResult:
        result = ValidationResult()
        self._check_employee(result, command.employee_id)
        self._check_times(result, command.check_in_time, command.check_out_time)
        self._check_status(result, command.status)
        self._check_notes(result, command.notes)
        # Auto check-in bypasses the one-record-per-day rule.
        if not command.is_auto_check_in:
            self._check_unique_day(
                result,
                employee_id=command.employee_id,
                check_in_time=command.check_in_time,
                message="An attendance record already exists for this employee on the selected day.",
            )
        return result

    def validate_update(self, command: UpdateAttendanceCommand) -> ValidationResult:
        result = ValidationResult()
        self._check_attendance(result, command.attendance_id)
        self._check_employee(result, command.employee_id)
        self._check_times(result, command.check_in_time, command.check_out_time)
        self._check_status(result, command.status)
        self._check_notes(result, command.notes)
        self._check_unique_day(
            result,
            employee_id=command.employee_id,
            check_in_time=command.check_in_time,
            exclude_id=command.attendance_id,
            message="Another attendance record already exists for this employee on the selected day.",
        )
        return result

    def validate_delete(self, command: DeleteAttendanceCommand) -> ValidationResult:
        result = ValidationResult()
        self._check_attendance(result, command.attendance_id)
        return result

    def _check_attendance(self, result: ValidationResult, attendance_id: int) -> None:
        if attendance_id is None or attendance_id <= 0:
            result.add("AttendanceId must be greater than 0.")
        elif not self._attendance.exists(attendance_id):
            result.add(ATTENDANCE_NOT_FOUND, not_found=True)

    def _check_employee(self, result: ValidationResult, employee_id: int) -> None:
        if employee_id is None or employee_id <= 0:
            result.add("EmployeeId must be greater than 0.")
        elif self._employees.find_by_id(employee_id) is None:
            result.add(EMPLOYEE_NOT_FOUND, not_found=True)

    def _check_times(self, result: ValidationResult, check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
        if check_in is None:
            result.add("CheckInTime is required.")
        elif check_in > self._now:
            result.add("CheckInTime cannot be in the future.")

        if check_out is None:
            return
        if check_in is not None and check_out < check_in:
            result.add("CheckOutTime must be greater than or equal to CheckInTime.")
        if check_out > self._now:
            result.add("CheckOutTime cannot be in the future.")

    def _check_status(self, result: ValidationResult, status: Optional[str]) -> None:
        if status is None:
            result.add("Status is required.")
        elif not isinstance(status, str):
            result.add("Status must be a string.")
        elif not status.strip():
            result.add("Status is required.")
        elif status not in AttendanceStatus.values():
            result.add(INVALID_STATUS)

    def _check_notes(self, result: ValidationResult, notes: Optional[str]) -> None:
        if notes is None:
            return
        if not isinstance(notes, str):
            result.add("Notes must be a string.")
        elif len(notes) > NOTES_MAX_LENGTH:
            result.add(f"Notes cannot exceed {NOTES_MAX_LENGTH} characters.")

    def _check_unique_day(
        self,
        result: ValidationResult,
        *,
        employee_id: int,
        check_in_time: Optional[datetime],
        message: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        if check_in_time is None or employee_id is None or employee_id <= 0:
            return
        day_start, day_end = day_bounds(check_in_time)
        if self._attendance.exists_on_day(
            employee_id=employee_id,
            day_start=day_start,
            day_end=day_end,
            exclude_id=exclude_id,
        ):
            result.add(message)
