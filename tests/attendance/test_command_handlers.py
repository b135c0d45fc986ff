from __future__ import annotations

from datetime import datetime, timedelta

from src.employee_attendance.employee_attendance.attendance.commands import (
    AutoCheckInCommand,
    CheckOutCommand,
    CreateAttendanceCommand,
    DeleteAttendanceCommand,
    GetAttendanceByIdQuery,
    UpdateAttendanceCommand,
)
from src.employee_attendance.employee_attendance.core.enums import AttendanceStatus, ErrorKind
from src.employee_attendance.employee_attendance.core.result import Err, Ok


def _create(container, **overrides):
    fields = dict(employee_id=5, check_in_time=datetime(2024, 1, 10, 8, 0), status="Present")
    fields.update(overrides)
    return container.dispatcher.send(CreateAttendanceCommand(**fields))


def test_create_persists_and_returns_record(container, uow, fixed_now):
    result = _create(container, notes="on site")

    assert isinstance(result, Ok)
    record = result.data
    assert record.attendance_id == 1
    assert record.employee_id == 5
    assert record.check_in_time == datetime(2024, 1, 10, 8, 0)
    assert record.check_out_time is None
    assert record.status == AttendanceStatus.PRESENT
    assert record.notes == "on site"
    assert record.created_at == record.updated_at == fixed_now
    assert record.employee_name == "Nguyen Van A"
    assert uow.commits == 1


def test_fetch_after_create_returns_input_fields(container, uow):
    created = _create(container, check_out_time=datetime(2024, 1, 10, 11, 0), status="Late").data

    fetched = container.attendance_queries.get_by_id(GetAttendanceByIdQuery(attendance_id=created.attendance_id))

    assert isinstance(fetched, Ok)
    assert fetched.data.check_in_time == datetime(2024, 1, 10, 8, 0)
    assert fetched.data.check_out_time == datetime(2024, 1, 10, 11, 0)
    assert fetched.data.status == AttendanceStatus.LATE
    assert uow.attendance.find_by_id(created.attendance_id) == created


def test_create_validation_failure_touches_nothing(container, uow, fixed_now):
    result = _create(container, check_in_time=fixed_now + timedelta(minutes=1))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.VALIDATION
    assert "CheckInTime cannot be in the future." in result.message
    assert uow.attendance.rows == {}
    assert uow.commits == 0


def test_create_persistence_failure_rolls_back(container, uow):
    uow.attendance.fail_writes = True

    result = _create(container)

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PERSISTENCE
    assert result.message == "Error creating attendance: database is unavailable"
    assert uow.rollbacks == 1
    assert uow.attendance.rows == {}


def test_update_applies_all_fields(container, uow, clock):
    created = _create(container).data
    clock.now = datetime(2024, 1, 10, 18, 0)

    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=created.attendance_id,
            employee_id=7,
            check_in_time=datetime(2024, 1, 10, 9, 0),
            check_out_time=datetime(2024, 1, 10, 17, 30),
            status="EarlyLeave",
            notes="left for appointment",
        )
    )

    assert isinstance(result, Ok)
    updated = result.data
    assert updated.employee_id == 7
    assert updated.employee_name == "Tran Thi B"
    assert updated.check_out_time == datetime(2024, 1, 10, 17, 30)
    assert updated.status == AttendanceStatus.EARLY_LEAVE
    assert updated.notes == "left for appointment"
    assert updated.created_at == created.created_at
    assert updated.updated_at == datetime(2024, 1, 10, 18, 0)


def test_update_invalid_status_mutates_nothing(container, uow):
    created = _create(container).data
    before = dict(uow.attendance.rows)

    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=created.attendance_id,
            employee_id=5,
            check_in_time=datetime(2024, 1, 10, 8, 0),
            status="InvalidValue",
        )
    )

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.VALIDATION
    assert "Invalid status. Valid values: Present, Absent, Leave, Late, EarlyLeave." in result.message
    assert uow.attendance.rows == before


def test_update_missing_record_is_not_found(container):
    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=404, employee_id=5, check_in_time=datetime(2024, 1, 10, 8, 0), status="Present"
        )
    )
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND


def test_update_check_out_before_check_in_fails(container):
    created = _create(container).data

    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=created.attendance_id,
            employee_id=5,
            check_in_time=datetime(2024, 1, 10, 8, 0),
            check_out_time=datetime(2024, 1, 10, 7, 0),
            status="Present",
        )
    )
    assert isinstance(result, Err)
    assert result.message == "CheckOutTime must be greater than or equal to CheckInTime."


def test_update_persistence_failure_keeps_old_values(container, uow):
    created = _create(container).data
    uow.attendance.fail_writes = True

    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=created.attendance_id,
            employee_id=5,
            check_in_time=datetime(2024, 1, 10, 9, 0),
            status="Late",
        )
    )

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PERSISTENCE
    assert uow.rollbacks == 1
    assert uow.attendance.rows[created.attendance_id].status == AttendanceStatus.PRESENT


def test_delete_missing_and_existing(container, uow):
    missing = container.dispatcher.send(DeleteAttendanceCommand(attendance_id=1))
    assert isinstance(missing, Err)
    assert missing.kind == ErrorKind.NOT_FOUND

    created = _create(container).data
    deleted = container.dispatcher.send(DeleteAttendanceCommand(attendance_id=created.attendance_id))
    assert deleted == Ok(True)
    assert uow.attendance.rows == {}


def test_delete_persistence_failure(container, uow):
    created = _create(container).data
    uow.attendance.fail_writes = True

    result = container.dispatcher.send(DeleteAttendanceCommand(attendance_id=created.attendance_id))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PERSISTENCE
    assert result.message.startswith("Error deleting attendance")
    assert created.attendance_id in uow.attendance.rows


def test_check_out_without_open_record_changes_nothing(container, uow):
    _create(container, check_out_time=datetime(2024, 1, 10, 11, 0))
    before = dict(uow.attendance.rows)

    result = container.dispatcher.send(CheckOutCommand(employee_id=5))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND
    assert "no open check-in" in result.message.lower()
    assert uow.attendance.rows == before
    assert uow.commits == 1


def test_check_out_ignores_records_from_other_days(container, clock):
    _create(container)
    clock.now = datetime(2024, 1, 11, 9, 0)

    result = container.dispatcher.send(CheckOutCommand(employee_id=5))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND


def test_check_out_forces_absent(container, clock):
    _create(container, status="Late")
    clock.now = datetime(2024, 1, 10, 17, 0)

    result = container.dispatcher.send(CheckOutCommand(employee_id=5))

    assert isinstance(result, Ok)
    assert result.data.check_out_time == datetime(2024, 1, 10, 17, 0)
    assert result.data.status == AttendanceStatus.ABSENT
    assert result.data.updated_at == datetime(2024, 1, 10, 17, 0)


def test_check_out_persistence_failure_rolls_back(container, uow):
    created = _create(container).data
    uow.attendance.fail_writes = True

    result = container.dispatcher.send(CheckOutCommand(employee_id=5))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PERSISTENCE
    assert uow.rollbacks == 1
    assert uow.attendance.rows[created.attendance_id].check_out_time is None


def test_auto_check_in_creates_present_record(container, fixed_now):
    result = container.dispatcher.send(AutoCheckInCommand(employee_id=7))

    assert isinstance(result, Ok)
    assert result.data.check_in_time == fixed_now
    assert result.data.status == AttendanceStatus.PRESENT


def test_auto_check_in_refreshes_open_record(container, uow, clock):
    created = _create(container, status="Late").data
    clock.now = datetime(2024, 1, 10, 13, 0)

    result = container.dispatcher.send(AutoCheckInCommand(employee_id=5))

    assert isinstance(result, Ok)
    assert result.data.attendance_id == created.attendance_id
    assert result.data.check_in_time == datetime(2024, 1, 10, 13, 0)
    assert result.data.status == AttendanceStatus.PRESENT
    assert len(uow.attendance.rows) == 1


def test_auto_check_in_after_closed_record_allows_second_row(container, uow, clock):
    _create(container, check_out_time=datetime(2024, 1, 10, 11, 0))

    result = container.dispatcher.send(AutoCheckInCommand(employee_id=5))

    assert isinstance(result, Ok)
    assert len(uow.attendance.rows) == 2


def test_attendance_lifecycle_scenario(container, uow, clock):
    first = _create(container, check_in_time=datetime(2024, 1, 10, 8, 0), status="Present")
    assert isinstance(first, Ok)
    attendance_id = first.data.attendance_id

    duplicate = _create(container, check_in_time=datetime(2024, 1, 10, 9, 0), status="Late")
    assert isinstance(duplicate, Err)
    assert duplicate.kind == ErrorKind.VALIDATION
    assert "already exists" in duplicate.message

    clock.now = datetime(2024, 1, 10, 17, 30)
    checked_out = container.dispatcher.send(CheckOutCommand(employee_id=5))
    assert isinstance(checked_out, Ok)
    assert checked_out.data.check_out_time == datetime(2024, 1, 10, 17, 30)
    assert checked_out.data.status == AttendanceStatus.ABSENT

    assert container.dispatcher.send(DeleteAttendanceCommand(attendance_id=attendance_id)) == Ok(True)
    missing = container.dispatcher.send(GetAttendanceByIdQuery(attendance_id=attendance_id))
    assert isinstance(missing, Err)
    assert missing.kind == ErrorKind.NOT_FOUND


def test_auto_check_in_marks_created_record(container):
    result = container.dispatcher.send(AutoCheckInCommand(employee_id=7))
    assert result.data.notes == "Auto check-in on login"


def test_auto_check_in_refresh_keeps_notes(container):
    _create(container, notes="manual entry")

    result = container.dispatcher.send(AutoCheckInCommand(employee_id=5))

    assert result.data.notes == "manual entry"


def test_update_of_row_removed_after_validation_is_not_found(container, uow):
    created = _create(container).data
    uow.attendance.update = lambda record: False

    result = container.dispatcher.send(
        UpdateAttendanceCommand(
            attendance_id=created.attendance_id,
            employee_id=5,
            check_in_time=datetime(2024, 1, 10, 9, 0),
            status="Late",
        )
    )

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND
    assert result.message == "Attendance record not found."


def test_delete_of_row_removed_after_validation_is_not_found(container, uow):
    created = _create(container).data
    uow.attendance.delete = lambda attendance_id: False

    result = container.dispatcher.send(DeleteAttendanceCommand(attendance_id=created.attendance_id))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND


def test_check_out_of_row_removed_after_lookup_is_not_found(container, uow, clock):
    _create(container)
    uow.attendance.update = lambda record: False
    clock.now = datetime(2024, 1, 10, 17, 0)

    result = container.dispatcher.send(CheckOutCommand(employee_id=5))

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NOT_FOUND
