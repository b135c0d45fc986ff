from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_iso_datetime
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công.

    ``attendance_id`` is None until the record has been persisted.
    ``employee_name`` is only filled when read joined with the employee.
    """

    attendance_id: Optional[int]
    employee_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_name: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "attendanceId": self.attendance_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "checkInTime": format_iso_datetime(self.check_in_time),
            "checkOutTime": format_iso_datetime(self.check_out_time),
            "status": self.status.value,
            "notes": self.notes,
            "createdAt": format_iso_datetime(self.created_at),
            "updatedAt": format_iso_datetime(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceView:
    """Read-model phục vụ màn hình danh sách chấm công."""

    attendance_id: int
    employee_id: int
    employee_name: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None

    @classmethod
    def from_record(cls, record: AttendanceRecord) -> "AttendanceView":
        return cls(
            attendance_id=int(record.attendance_id),
            employee_id=record.employee_id,
            employee_name=record.employee_name or "",
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            status=record.status,
            notes=record.notes,
        )

    def to_dict(self) -> dict:
        return {
            "attendanceId": self.attendance_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "checkInTime": format_iso_datetime(self.check_in_time),
            "checkOutTime": format_iso_datetime(self.check_out_time),
            "status": self.status.value,
            "notes": self.notes,
        }
