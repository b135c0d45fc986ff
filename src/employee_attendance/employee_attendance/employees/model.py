from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Attendance only reads employees; creating and editing them belongs to the
    employee management service.
    """

    employee_id: int
    first_name: str
    last_name: str
    email: str
    hire_date: Optional[date] = None
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
