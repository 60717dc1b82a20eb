# Outcome of a service operation: either a value or one of the known failure kinds

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def result_code(self) -> str:
        return f"{self.status_code}-1"


_STATUS_CODES = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BAD_REQUEST: 400,
}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged result returned by the guard and the services.

    Exactly one of `value` / `error` is meaningful: check `ok` first.
    Failures are values, not exceptions; routers turn them into responses.
    """
    value: Optional[T] = None
    error: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result":
        return cls(error=Failure(kind, message))

    def map(self, func) -> "Result":
        """Apply `func` to the value of a success; failures pass through unchanged."""
        if not self.ok:
            return self
        return Result.success(func(self.value))


def unauthorized(message: str = "Please log in first.") -> Result:
    return Result.failure(ErrorKind.UNAUTHORIZED, message)

def forbidden(message: str) -> Result:
    return Result.failure(ErrorKind.FORBIDDEN, message)

def not_found(message: str) -> Result:
    return Result.failure(ErrorKind.NOT_FOUND, message)

def bad_request(message: str) -> Result:
    return Result.failure(ErrorKind.BAD_REQUEST, message)
