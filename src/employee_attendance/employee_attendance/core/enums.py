from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class AttendanceStatus(str, Enum):
    """Trạng thái chấm công chuẩn hoá lưu trong CSDL."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    LATE = "Late"
    EARLY_LEAVE = "EarlyLeave"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


class ErrorKind(str, Enum):
    """Loại lỗi trả về trong result envelope."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    PERSISTENCE = "PERSISTENCE"
