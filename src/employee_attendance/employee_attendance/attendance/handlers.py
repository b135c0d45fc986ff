from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import AttendanceStatus, ErrorKind
from ..core.exceptions import PersistenceError
from ..core.result import Err, Ok, Result
from ..database.unit_of_work import UnitOfWork
from .commands import (
    AutoCheckInCommand,
    CheckOutCommand,
    CreateAttendanceCommand,
    DeleteAttendanceCommand,
    UpdateAttendanceCommand,
)
from .model import AttendanceRecord
from .validator import ATTENDANCE_NOT_FOUND, AttendanceValidator

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]
Clock = Callable[[], datetime]

AUTO_CHECK_IN_NOTE = "Auto check-in on login"


class _CommandHandler:
    def __init__(self, uow_factory: UnitOfWorkFactory, *, clock: Clock = now_local):
        self._uow_factory = uow_factory
        self._clock = clock

    @staticmethod
    def _vanished(attendance_id: int) -> Err:
        logger.warning("Attendance id=%s disappeared before the write", attendance_id)
        return Err(kind=ErrorKind.NOT_FOUND, message=ATTENDANCE_NOT_FOUND)

    @staticmethod
    def _persistence_failure(prefix: str, ex: Exception) -> Err:
        return Err(kind=ErrorKind.PERSISTENCE, message=f"{prefix}: {ex}")


class CreateAttendanceHandler(_CommandHandler):
    def handle(self, command: CreateAttendanceCommand) -> Result[AttendanceRecord]:
        logger.info("Creating attendance for employee_id=%s", command.employee_id)
        uow = self._uow_factory()
        now = self._clock()

        try:
            validation = AttendanceValidator(uow.employees, uow.attendance, now=now).validate_create(command)
        except PersistenceError as ex:
            logger.error("Validation lookup failed for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error creating attendance", ex)
        if not validation.is_valid:
            logger.warning("Validation failed for employee_id=%s: %s", command.employee_id, validation.message)
            return validation.to_err()

        record = AttendanceRecord(
            attendance_id=None,
            employee_id=command.employee_id,
            check_in_time=command.check_in_time,
            check_out_time=command.check_out_time,
            status=AttendanceStatus(command.status),
            notes=command.notes,
            created_at=now,
            updated_at=now,
        )

        try:
            with uow.transaction():
                attendance_id = uow.attendance.add(record)
            created = uow.attendance.find_by_id(attendance_id) or replace(record, attendance_id=attendance_id)
        except Exception as ex:
            logger.error("Error creating attendance for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error creating attendance", ex)

        logger.info("Created attendance id=%s for employee_id=%s", created.attendance_id, command.employee_id)
        return Ok(created)


class UpdateAttendanceHandler(_CommandHandler):
    def handle(self, command: UpdateAttendanceCommand) -> Result[AttendanceRecord]:
        logger.info("Updating attendance id=%s", command.attendance_id)
        uow = self._uow_factory()
        now = self._clock()

        try:
            validation = AttendanceValidator(uow.employees, uow.attendance, now=now).validate_update(command)
            existing = uow.attendance.find_by_id(command.attendance_id) if validation.is_valid else None
        except PersistenceError as ex:
            logger.error("Validation lookup failed for attendance id=%s", command.attendance_id, exc_info=True)
            return self._persistence_failure("Error updating attendance", ex)
        if not validation.is_valid:
            logger.warning("Validation failed for attendance id=%s: %s", command.attendance_id, validation.message)
            return validation.to_err()
        if existing is None:
            logger.warning("Attendance id=%s not found", command.attendance_id)
            return Err(kind=ErrorKind.NOT_FOUND, message=ATTENDANCE_NOT_FOUND)

        changed = replace(
            existing,
            employee_id=command.employee_id,
            check_in_time=command.check_in_time,
            check_out_time=command.check_out_time,
            status=AttendanceStatus(command.status),
            notes=command.notes,
            updated_at=now,
        )

        try:
            with uow.transaction():
                found = uow.attendance.update(changed)
            updated = (uow.attendance.find_by_id(command.attendance_id) or changed) if found else None
        except Exception as ex:
            logger.error("Error updating attendance id=%s", command.attendance_id, exc_info=True)
            return self._persistence_failure("Error updating attendance", ex)
        if updated is None:
            return self._vanished(command.attendance_id)

        logger.info("Updated attendance id=%s", command.attendance_id)
        return Ok(updated)


class DeleteAttendanceHandler(_CommandHandler):
    def handle(self, command: DeleteAttendanceCommand) -> Result[bool]:
        logger.info("Deleting attendance id=%s", command.attendance_id)
        uow = self._uow_factory()

        try:
            validation = AttendanceValidator(uow.employees, uow.attendance, now=self._clock()).validate_delete(command)
            existing = uow.attendance.find_by_id(command.attendance_id) if validation.is_valid else None
        except PersistenceError as ex:
            logger.error("Validation lookup failed for attendance id=%s", command.attendance_id, exc_info=True)
            return self._persistence_failure("Error deleting attendance", ex)
        if not validation.is_valid:
            logger.warning("Validation failed for attendance id=%s: %s", command.attendance_id, validation.message)
            return validation.to_err()
        if existing is None:
            logger.warning("Attendance id=%s not found", command.attendance_id)
            return Err(kind=ErrorKind.NOT_FOUND, message=ATTENDANCE_NOT_FOUND)

        try:
            with uow.transaction():
                found = uow.attendance.delete(command.attendance_id)
        except Exception as ex:
            logger.error("Error deleting attendance id=%s", command.attendance_id, exc_info=True)
            return self._persistence_failure("Error deleting attendance", ex)
        if not found:
            return self._vanished(command.attendance_id)

        logger.info("Deleted attendance id=%s", command.attendance_id)
        return Ok(True)


class CheckOutHandler(_CommandHandler):
    """Close today's open record for the caller.

    Check-out always marks the record ``Absent``, whatever its prior status.
    """

    def handle(self, command: CheckOutCommand) -> Result[AttendanceRecord]:
        logger.info("Processing check-out for employee_id=%s", command.employee_id)
        uow = self._uow_factory()
        now = self._clock()
        day_start, day_end = day_bounds(now)

        try:
            open_record = uow.attendance.find_open_for_day(
                employee_id=command.employee_id, day_start=day_start, day_end=day_end
            )
        except PersistenceError as ex:
            logger.error("Check-out lookup failed for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error updating check-out", ex)
        if open_record is None:
            logger.warning("No open check-in today for employee_id=%s", command.employee_id)
            return Err(kind=ErrorKind.NOT_FOUND, message="No open check-in found for today.")

        closed = replace(open_record, check_out_time=now, status=AttendanceStatus.ABSENT, updated_at=now)

        try:
            with uow.transaction():
                found = uow.attendance.update(closed)
            updated = (uow.attendance.find_by_id(closed.attendance_id) or closed) if found else None
        except Exception as ex:
            logger.error("Check-out failed for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error updating check-out", ex)
        if updated is None:
            return self._vanished(closed.attendance_id)

        logger.info("Check-out recorded for employee_id=%s at %s", command.employee_id, now)
        return Ok(updated)


class AutoCheckInHandler(_CommandHandler):
    """System-initiated check-in for the caller's session.

    An open record from earlier today is refreshed in place; otherwise a new
    ``Present`` record is created with the same-day rule bypassed.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, create: CreateAttendanceHandler, *, clock: Clock = now_local):
        super().__init__(uow_factory, clock=clock)
        self._create = create

    def handle(self, command: AutoCheckInCommand) -> Result[AttendanceRecord]:
        logger.info("Auto check-in for employee_id=%s", command.employee_id)
        uow = self._uow_factory()
        now = self._clock()
        day_start, day_end = day_bounds(now)

        try:
            open_record = uow.attendance.find_open_for_day(
                employee_id=command.employee_id, day_start=day_start, day_end=day_end
            )
        except PersistenceError as ex:
            logger.error("Auto check-in lookup failed for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error recording check-in", ex)

        if open_record is None:
            return self._create.handle(
                CreateAttendanceCommand(
                    employee_id=command.employee_id,
                    check_in_time=now,
                    status=AttendanceStatus.PRESENT.value,
                    notes=AUTO_CHECK_IN_NOTE,
                    is_auto_check_in=True,
                )
            )

        refreshed = replace(open_record, check_in_time=now, status=AttendanceStatus.PRESENT, updated_at=now)
        try:
            with uow.transaction():
                found = uow.attendance.update(refreshed)
            updated = (uow.attendance.find_by_id(refreshed.attendance_id) or refreshed) if found else None
        except Exception as ex:
            logger.error("Auto check-in update failed for employee_id=%s", command.employee_id, exc_info=True)
            return self._persistence_failure("Error recording check-in", ex)
        if updated is None:
            return self._vanished(refreshed.attendance_id)

        logger.info("Check-in refreshed for employee_id=%s at %s", command.employee_id, now)
        return Ok(updated)
