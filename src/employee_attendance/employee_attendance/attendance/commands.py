"""Command and query objects.

Each one is dispatched to exactly one handler (see ``dispatcher.py``).
Commands mutate attendance data; queries only read it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class CreateAttendanceCommand:
    employee_id: int
    check_in_time: Optional[datetime]
    status: Optional[str]
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None
    is_auto_check_in: bool = False


@dataclass(frozen=True)
class UpdateAttendanceCommand:
    attendance_id: int
    employee_id: int
    check_in_time: Optional[datetime]
    status: Optional[str]
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class DeleteAttendanceCommand:
    attendance_id: int


@dataclass(frozen=True)
class CheckOutCommand:
    employee_id: int


@dataclass(frozen=True)
class AutoCheckInCommand:
    employee_id: int


@dataclass(frozen=True)
class GetAllAttendanceQuery:
    page_number: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class GetAttendancesByEmployeeQuery:
    employee_id: int
    page_number: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class GetAttendanceByIdQuery:
    attendance_id: int


@dataclass(frozen=True)
class CalculateWorkHoursQuery:
    attendance_id: int
