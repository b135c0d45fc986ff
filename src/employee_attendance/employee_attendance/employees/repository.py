from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Giao diện repository cho Employee (chỉ đọc).

    Lưu ý (DIP): validator và handler phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError
