from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

MISSING_ERROR_DETAILS = "missing error details"


class HttpStatusError(Exception):
    """An HTTP status paired with the error that caused it.

    Both fields are fixed at construction.
    """

    def __init__(self, status: int, cause: BaseException):
        super().__init__(status, cause)
        self._status = status
        self._cause = cause

    @property
    def status(self) -> int:
        return self._status

    @property
    def cause(self) -> BaseException:
        return self._cause

    @property
    def message(self) -> str:
        return str(self._cause)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"HttpStatusError(status={self._status}, cause={self._cause!r})"


class HttpAbort(BaseException):
    """Raised to abandon a handler. Only the recovery boundary should catch it."""

    def __init__(self, error: HttpStatusError):
        super().__init__(error)
        self.error = error


class ResponseAlreadyWritten(RuntimeError):
    pass


@dataclass(frozen=True)
class Text:
    text: str

    def to_error(self) -> BaseException:
        return Exception(self.text)


@dataclass(frozen=True)
class Wrapped:
    error: BaseException

    def to_error(self) -> BaseException:
        return self.error


@dataclass(frozen=True)
class Unspecified:
    def to_error(self) -> BaseException:
        return Exception(MISSING_ERROR_DETAILS)


ErrorLike = Union[Text, Wrapped, Unspecified]


def error_like(value: Any) -> ErrorLike:
    """Lift a raw value (str, exception, anything else) into an ErrorLike."""
    if isinstance(value, (Text, Wrapped, Unspecified)):
        return value
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, BaseException):
        return Wrapped(value)
    return Unspecified()


def to_err(value: Any) -> BaseException:
    """Normalize an error-like value. Never raises."""
    return error_like(value).to_error()


def new_error(status: int, err: Any = None) -> HttpStatusError:
    return HttpStatusError(status, to_err(err))


def abort(status: int, err: Any = None) -> None:
    """Abandon the current handler with `status`. Does not return."""
    raise HttpAbort(new_error(status, err))
