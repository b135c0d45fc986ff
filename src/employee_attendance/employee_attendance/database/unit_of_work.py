from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

import mysql.connector

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.repository import AttendanceRepository
from ..core.exceptions import PersistenceError
from ..employees.mysql_employee_repository import MySQLEmployeeRepository
from ..employees.repository import EmployeeRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)


class UnitOfWork(ABC):
    """Transactional boundary plus the repositories bound to it.

    Only one transaction may be open at a time. ``transaction()`` commits on a
    clean exit and rolls back, then re-raises, on any exception.
    """

    employees: EmployeeRepository
    attendance: AttendanceRepository

    @abstractmethod
    def begin(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError

    @contextmanager
    def transaction(self) -> Iterator["UnitOfWork"]:
        self.begin()
        try:
            yield self
        except Exception:
            self.rollback()
            raise
        self.commit()


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._conn = None
        self.employees = MySQLEmployeeRepository(self)
        self.attendance = MySQLAttendanceRepository(self)

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None

    @contextmanager
    def cursor(self):
        """Cursor on the open transaction, or a short-lived one outside it."""

        try:
            if self._conn is None:
                with db_cursor(self._conn_factory) as (_, cur):
                    yield cur
            else:
                cur = self._conn.cursor(dictionary=True)
                try:
                    yield cur
                finally:
                    cur.close()
        except mysql.connector.Error as ex:
            raise PersistenceError(str(ex)) from ex

    def begin(self) -> None:
        if self._conn is not None:
            raise PersistenceError("Transaction already started")
        conn = self._conn_factory.connect()
        try:
            conn.start_transaction()
        except mysql.connector.Error as ex:
            conn.close()
            raise PersistenceError(str(ex)) from ex
        self._conn = conn

    def commit(self) -> None:
        conn = self._release("commit")
        try:
            conn.commit()
        except mysql.connector.Error as ex:
            raise PersistenceError(str(ex)) from ex
        finally:
            conn.close()

    def rollback(self) -> None:
        conn = self._release("rollback")
        try:
            conn.rollback()
        except mysql.connector.Error:
            logger.exception("Rollback failed")
        finally:
            conn.close()

    def _release(self, action: str):
        if self._conn is None:
            raise PersistenceError(f"No open transaction to {action}")
        conn, self._conn = self._conn, None
        return conn
