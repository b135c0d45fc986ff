from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.employee_attendance.employee_attendance.attendance.model import AttendanceRecord
from src.employee_attendance.employee_attendance.container import build_container
from src.employee_attendance.employee_attendance.core.exceptions import PersistenceError
from src.employee_attendance.employee_attendance.database.unit_of_work import UnitOfWork
from src.employee_attendance.employee_attendance.employees.model import Employee


class InMemoryEmployees:
    def __init__(self, employees: dict[int, Employee]):
        self.employees = employees

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self.rows: dict[int, AttendanceRecord] = {}
        self.next_id = 1
        self.fail_writes = False

    def _joined(self, record: AttendanceRecord) -> AttendanceRecord:
        employee = self._employees.find_by_id(record.employee_id)
        return replace(record, employee_name=employee.full_name if employee else None)

    def _check_write(self) -> None:
        if self.fail_writes:
            raise PersistenceError("database is unavailable")

    def find_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        record = self.rows.get(attendance_id)
        return self._joined(record) if record else None

    def exists(self, attendance_id: int) -> bool:
        return attendance_id in self.rows

    def exists_on_day(self, *, employee_id, day_start, day_end, exclude_id=None) -> bool:
        return any(
            r.employee_id == employee_id
            and day_start <= r.check_in_time < day_end
            and r.attendance_id != exclude_id
            for r in self.rows.values()
        )

    def find_open_for_day(self, *, employee_id, day_start, day_end) -> Optional[AttendanceRecord]:
        candidates = [
            r
            for r in self.rows.values()
            if r.employee_id == employee_id and day_start <= r.check_in_time < day_end and r.check_out_time is None
        ]
        if not candidates:
            return None
        candidates.sort(key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)
        return self._joined(candidates[0])

    def add(self, record: AttendanceRecord) -> int:
        self._check_write()
        attendance_id = self.next_id
        self.next_id += 1
        self.rows[attendance_id] = replace(record, attendance_id=attendance_id, employee_name=None)
        return attendance_id

    def update(self, record: AttendanceRecord) -> bool:
        self._check_write()
        if record.attendance_id not in self.rows:
            return False
        self.rows[record.attendance_id] = replace(record, employee_name=None)
        return True

    def delete(self, attendance_id: int) -> bool:
        self._check_write()
        return self.rows.pop(attendance_id, None) is not None

    def list_page(self, *, offset: int, limit: int, employee_id: Optional[int] = None):
        items = sorted(self.rows.values(), key=lambda r: r.attendance_id)
        if employee_id is not None:
            items = [r for r in items if r.employee_id == employee_id]
        return [self._joined(r) for r in items[offset : offset + limit]]


class InMemoryUnitOfWork(UnitOfWork):
    """Snapshot-based transactions: rollback restores the rows seen at begin()."""

    def __init__(self, employees: dict[int, Employee]):
        self.employees = InMemoryEmployees(employees)
        self.attendance = InMemoryAttendance(self.employees)
        self._snapshot = None
        self.commits = 0
        self.rollbacks = 0

    def begin(self) -> None:
        if self._snapshot is not None:
            raise PersistenceError("Transaction already started")
        self._snapshot = (dict(self.attendance.rows), self.attendance.next_id)

    def commit(self) -> None:
        if self._snapshot is None:
            raise PersistenceError("No open transaction to commit")
        self._snapshot = None
        self.commits += 1

    def rollback(self) -> None:
        if self._snapshot is None:
            raise PersistenceError("No open transaction to rollback")
        self.attendance.rows, self.attendance.next_id = self._snapshot
        self._snapshot = None
        self.rollbacks += 1


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 12, 0, 0)


@pytest.fixture
def clock(fixed_now) -> MutableClock:
    return MutableClock(fixed_now)


@pytest.fixture
def employees() -> dict[int, Employee]:
    return {
        5: Employee(employee_id=5, first_name="Nguyen", last_name="Van A", email="a@example.com"),
        7: Employee(employee_id=7, first_name="Tran", last_name="Thi B", email="b@example.com"),
    }


@pytest.fixture
def uow(employees) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(employees)


@pytest.fixture
def container(uow, clock):
    return build_container(uow_factory=lambda: uow, clock=clock)


@pytest.fixture
def app(container, monkeypatch):
    from src.employee_attendance.employee_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app({"SECRET_KEY": "test-secret", "TESTING": True}, container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(employee_id: int = 5, role: str = "Admin"):
        with client.session_transaction() as sess:
            sess["employee_id"] = employee_id
            sess["role"] = role

    return _login
