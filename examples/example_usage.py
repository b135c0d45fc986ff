"""Ví dụ: gửi command/query qua dispatcher (không qua Flask).

Controllers chỉ là lớp mỏng; nghiệp vụ nằm ở các handler.
"""

import importlib

from config import get_settings_module

from src.employee_attendance.employee_attendance.attendance.commands import GetAttendancesByEmployeeQuery
from src.employee_attendance.employee_attendance.container import build_container
from src.employee_attendance.employee_attendance.core.result import to_envelope


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    result = container.dispatcher.send(GetAttendancesByEmployeeQuery(employee_id=1, page_size=5))
    print(to_envelope(result, serialize=lambda views: [v.to_dict() for v in views]))


if __name__ == "__main__":
    main()
