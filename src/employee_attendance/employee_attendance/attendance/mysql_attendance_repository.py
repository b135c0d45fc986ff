from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

if TYPE_CHECKING:
    from ..database.unit_of_work import MySQLUnitOfWork


_SELECT_WITH_EMPLOYEE = """
    SELECT a.attendance_id, a.employee_id, a.check_in_time, a.check_out_time,
           a.status, a.notes, a.created_at, a.updated_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM attendances a
    LEFT JOIN employees e ON e.employee_id = a.employee_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=r.get("employee_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, uow: "MySQLUnitOfWork"):
        self._uow = uow

    def find_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._uow.cursor() as cur:
            cur.execute(_SELECT_WITH_EMPLOYEE + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def exists(self, attendance_id: int) -> bool:
        with self._uow.cursor() as cur:
            cur.execute("SELECT 1 AS found FROM attendances WHERE attendance_id=%s LIMIT 1", (int(attendance_id),))
            return fetchone(cur) is not None

    def exists_on_day(
        self,
        *,
        employee_id: int,
        day_start: datetime,
        day_end: datetime,
        exclude_id: Optional[int] = None,
    ) -> bool:
        clauses = ["employee_id=%s", "check_in_time >= %s", "check_in_time < %s"]
        params: list[object] = [int(employee_id), day_start, day_end]
        if exclude_id is not None:
            clauses.append("attendance_id <> %s")
            params.append(int(exclude_id))

        with self._uow.cursor() as cur:
            cur.execute(
                f"SELECT 1 AS found FROM attendances WHERE {' AND '.join(clauses)} LIMIT 1",
                tuple(params),
            )
            return fetchone(cur) is not None

    def find_open_for_day(self, *, employee_id: int, day_start: datetime, day_end: datetime) -> Optional[AttendanceRecord]:
        with self._uow.cursor() as cur:
            cur.execute(
                _SELECT_WITH_EMPLOYEE
                + """
                WHERE a.employee_id=%s
                  AND a.check_in_time >= %s AND a.check_in_time < %s
                  AND a.check_out_time IS NULL
                ORDER BY a.check_in_time DESC, a.attendance_id DESC
                LIMIT 1
                """,
                (int(employee_id), day_start, day_end),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def add(self, record: AttendanceRecord) -> int:
        with self._uow.cursor() as cur:
            cur.execute(
                """
                INSERT INTO attendances(employee_id, check_in_time, check_out_time, status, notes, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.check_in_time,
                    record.check_out_time,
                    record.status.value,
                    record.notes,
                    record.created_at,
                    record.updated_at,
                ),
            )
            return int(cur.lastrowid)

    def update(self, record: AttendanceRecord) -> bool:
        with self._uow.cursor() as cur:
            cur.execute(
                """
                UPDATE attendances
                SET employee_id=%s, check_in_time=%s, check_out_time=%s, status=%s, notes=%s, updated_at=%s
                WHERE attendance_id=%s
                """,
                (
                    record.employee_id,
                    record.check_in_time,
                    record.check_out_time,
                    record.status.value,
                    record.notes,
                    record.updated_at,
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with self._uow.cursor() as cur:
            cur.execute("DELETE FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_page(self, *, offset: int, limit: int, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        where = ""
        params: list[object] = []
        if employee_id is not None:
            where = " WHERE a.employee_id=%s"
            params.append(int(employee_id))
        params.extend([int(limit), int(offset)])

        with self._uow.cursor() as cur:
            cur.execute(
                _SELECT_WITH_EMPLOYEE + where + " ORDER BY a.attendance_id ASC LIMIT %s OFFSET %s",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
