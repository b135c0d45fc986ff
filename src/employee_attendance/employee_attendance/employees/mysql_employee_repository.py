from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..database.mysql_base import fetchone
from .model import Employee
from .repository import EmployeeRepository

if TYPE_CHECKING:
    from ..database.unit_of_work import MySQLUnitOfWork


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, uow: "MySQLUnitOfWork"):
        self._uow = uow

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        with self._uow.cursor() as cur:
            cur.execute(
                """
                SELECT employee_id, first_name, last_name, email, hire_date,
                       department_id, position_id, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                first_name=row["first_name"],
                last_name=row["last_name"],
                email=row["email"],
                hire_date=row.get("hire_date"),
                department_id=row.get("department_id"),
                position_id=row.get("position_id"),
                is_active=bool(row.get("is_active", True)),
            )
