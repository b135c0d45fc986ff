from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        """Record joined with its employee's name, or None."""

        raise NotImplementedError

    def exists(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def exists_on_day(
        self,
        *,
        employee_id: int,
        day_start: datetime,
        day_end: datetime,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """Any record for the employee with ``day_start <= check_in_time < day_end``."""

        raise NotImplementedError

    def find_open_for_day(self, *, employee_id: int, day_start: datetime, day_end: datetime) -> Optional[AttendanceRecord]:
        """Most recent record checked in within the day and not yet checked out."""

        raise NotImplementedError

    def add(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_page(self, *, offset: int, limit: int, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Records ordered by ``attendance_id``."""

        raise NotImplementedError
