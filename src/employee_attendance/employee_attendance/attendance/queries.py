from __future__ import annotations

import logging

from ..core.constants import MAX_PAGE_SIZE
from ..core.enums import ErrorKind
from ..core.exceptions import PersistenceError
from ..core.result import Err, Ok, Result
from .commands import (
    CalculateWorkHoursQuery,
    GetAllAttendanceQuery,
    GetAttendanceByIdQuery,
    GetAttendancesByEmployeeQuery,
)
from .handlers import UnitOfWorkFactory
from .model import AttendanceView
from .validator import ATTENDANCE_NOT_FOUND, ValidationResult

logger = logging.getLogger(__name__)


def _check_paging(result: ValidationResult, page_number: int, page_size: int) -> None:
    if page_number <= 0:
        result.add("PageNumber must be greater than 0.")
    if page_size <= 0:
        result.add("PageSize must be greater than 0.")
    elif page_size > MAX_PAGE_SIZE:
        result.add(f"PageSize cannot exceed {MAX_PAGE_SIZE}.")


class AttendanceQueries:
    """Read side: projects attendance rows into ``AttendanceView`` read-models."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def get_all(self, query: GetAllAttendanceQuery) -> Result[list[AttendanceView]]:
        validation = ValidationResult()
        _check_paging(validation, query.page_number, query.page_size)
        if not validation.is_valid:
            logger.warning("Invalid attendance listing request: %s", validation.message)
            return validation.to_err()

        try:
            rows = self._uow_factory().attendance.list_page(
                offset=(query.page_number - 1) * query.page_size,
                limit=query.page_size,
            )
        except PersistenceError as ex:
            logger.error("Error listing attendance records", exc_info=True)
            return Err(kind=ErrorKind.PERSISTENCE, message=f"Error retrieving attendance records: {ex}")

        logger.info("Retrieved %s attendance records", len(rows))
        return Ok([AttendanceView.from_record(r) for r in rows])

    def get_by_employee(self, query: GetAttendancesByEmployeeQuery) -> Result[list[AttendanceView]]:
        validation = ValidationResult()
        if query.employee_id <= 0:
            validation.add("EmployeeId must be greater than 0.")
        _check_paging(validation, query.page_number, query.page_size)
        if not validation.is_valid:
            logger.warning("Invalid request for employee_id=%s: %s", query.employee_id, validation.message)
            return validation.to_err()

        try:
            rows = self._uow_factory().attendance.list_page(
                offset=(query.page_number - 1) * query.page_size,
                limit=query.page_size,
                employee_id=query.employee_id,
            )
        except PersistenceError as ex:
            logger.error("Error listing attendance for employee_id=%s", query.employee_id, exc_info=True)
            return Err(kind=ErrorKind.PERSISTENCE, message=f"Error retrieving attendance records: {ex}")

        if not rows:
            logger.warning("No attendance records found for employee_id=%s", query.employee_id)
            return Err(kind=ErrorKind.NOT_FOUND, message="No attendance records found for this employee.")
        return Ok([AttendanceView.from_record(r) for r in rows])

    def get_by_id(self, query: GetAttendanceByIdQuery) -> Result[AttendanceView]:
        try:
            record = self._uow_factory().attendance.find_by_id(query.attendance_id)
        except PersistenceError as ex:
            logger.error("Error reading attendance id=%s", query.attendance_id, exc_info=True)
            return Err(kind=ErrorKind.PERSISTENCE, message=f"Error retrieving attendance record: {ex}")
        if record is None:
            return Err(kind=ErrorKind.NOT_FOUND, message=ATTENDANCE_NOT_FOUND)
        return Ok(AttendanceView.from_record(record))

    def work_hours(self, query: CalculateWorkHoursQuery) -> Result[float]:
        if query.attendance_id <= 0:
            return Err(kind=ErrorKind.VALIDATION, message="AttendanceId must be greater than 0.")

        try:
            record = self._uow_factory().attendance.find_by_id(query.attendance_id)
        except PersistenceError as ex:
            logger.error("Error reading attendance id=%s", query.attendance_id, exc_info=True)
            return Err(kind=ErrorKind.PERSISTENCE, message=f"Error calculating work hours: {ex}")
        if record is None:
            return Err(kind=ErrorKind.NOT_FOUND, message=ATTENDANCE_NOT_FOUND)
        if record.check_out_time is None:
            logger.warning("Cannot calculate work hours for attendance id=%s: no check-out", query.attendance_id)
            return Err(kind=ErrorKind.VALIDATION, message="Cannot calculate work hours: CheckOutTime is not set.")

        hours = (record.check_out_time - record.check_in_time).total_seconds() / 3600
        logger.info("Attendance id=%s worked %.2f hours", query.attendance_id, hours)
        return Ok(hours)
