from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.commands import (
    AutoCheckInCommand,
    CalculateWorkHoursQuery,
    CheckOutCommand,
    CreateAttendanceCommand,
    DeleteAttendanceCommand,
    GetAllAttendanceQuery,
    GetAttendanceByIdQuery,
    GetAttendancesByEmployeeQuery,
    UpdateAttendanceCommand,
)
from .attendance.dispatcher import Dispatcher
from .attendance.handlers import (
    AutoCheckInHandler,
    CheckOutHandler,
    Clock,
    CreateAttendanceHandler,
    DeleteAttendanceHandler,
    UnitOfWorkFactory,
    UpdateAttendanceHandler,
)
from .attendance.queries import AttendanceQueries
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork


@dataclass(frozen=True)
class Container:
    uow_factory: UnitOfWorkFactory

    create_attendance: CreateAttendanceHandler
    update_attendance: UpdateAttendanceHandler
    delete_attendance: DeleteAttendanceHandler
    check_out: CheckOutHandler
    auto_check_in: AutoCheckInHandler
    attendance_queries: AttendanceQueries

    dispatcher: Dispatcher
    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    db_config: Optional[dict] = None,
    uow_factory: Optional[UnitOfWorkFactory] = None,
    clock: Clock = now_local,
) -> Container:
    """Wire handlers over MySQL (``db_config``) or over a given unit-of-work factory."""

    conn = None
    if uow_factory is None:
        if db_config is None:
            raise ValueError("build_container needs db_config or uow_factory")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

        def uow_factory() -> MySQLUnitOfWork:
            return MySQLUnitOfWork(conn)

    create_attendance = CreateAttendanceHandler(uow_factory, clock=clock)
    update_attendance = UpdateAttendanceHandler(uow_factory, clock=clock)
    delete_attendance = DeleteAttendanceHandler(uow_factory, clock=clock)
    check_out = CheckOutHandler(uow_factory, clock=clock)
    auto_check_in = AutoCheckInHandler(uow_factory, create_attendance, clock=clock)
    attendance_queries = AttendanceQueries(uow_factory)

    dispatcher = Dispatcher()
    dispatcher.register(CreateAttendanceCommand, create_attendance.handle)
    dispatcher.register(UpdateAttendanceCommand, update_attendance.handle)
    dispatcher.register(DeleteAttendanceCommand, delete_attendance.handle)
    dispatcher.register(CheckOutCommand, check_out.handle)
    dispatcher.register(AutoCheckInCommand, auto_check_in.handle)
    dispatcher.register(GetAllAttendanceQuery, attendance_queries.get_all)
    dispatcher.register(GetAttendancesByEmployeeQuery, attendance_queries.get_by_employee)
    dispatcher.register(GetAttendanceByIdQuery, attendance_queries.get_by_id)
    dispatcher.register(CalculateWorkHoursQuery, attendance_queries.work_hours)

    return Container(
        uow_factory=uow_factory,
        create_attendance=create_attendance,
        update_attendance=update_attendance,
        delete_attendance=delete_attendance,
        check_out=check_out,
        auto_check_in=auto_check_in,
        attendance_queries=attendance_queries,
        dispatcher=dispatcher,
        conn=conn,
    )
