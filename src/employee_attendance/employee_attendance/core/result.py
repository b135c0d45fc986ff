from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful handler outcome carrying its payload."""

    data: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed handler outcome: a kind plus one human-readable message."""

    kind: ErrorKind
    message: str

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_not_found(self) -> bool:
        return self.kind == ErrorKind.NOT_FOUND


Result = Union[Ok[T], Err]


def to_envelope(result: Result, *, serialize: Optional[Callable[[Any], Any]] = None) -> dict:
    """Render a result as ``{isSuccess, data, error}`` for the HTTP layer."""

    if isinstance(result, Ok):
        data = serialize(result.data) if serialize else result.data
        return {"isSuccess": True, "data": data, "error": None}
    return {"isSuccess": False, "data": None, "error": {"message": result.message}}
