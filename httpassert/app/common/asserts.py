"""Assertions for request handlers.

Each check raises `HttpAbort` when it fails and so never returns to the
line after the call. Handlers using them must run under the recovery
boundary (`recoverer`, `recoverable` or `as_wsgi`), which turns the abort
into a JSON error response.

    user = users.get(user_id)
    assert_with_status(user is not None, 404, "user not found")
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from httpassert.app.common.errors import HttpAbort, HttpStatusError, to_err

logger = logging.getLogger(__name__)

Logger = Union[logging.Logger, logging.LoggerAdapter]

INTERNAL_SERVER_ERROR = 500


def _fail(status: int, err: Any, log: Optional[Logger]) -> None:
    cause = to_err(err)
    (log or logger).warning(
        "assertion failed status=%s error=%s",
        status,
        cause,
        extra={"status": status},
    )
    raise HttpAbort(HttpStatusError(status, cause))


def assert_that(condition: bool, err: Any = None, *, log: Optional[Logger] = None) -> None:
    """Abort with 500 unless `condition` holds."""
    assert_with_status(condition, INTERNAL_SERVER_ERROR, err, log=log)


def assert_with_status(condition: bool, status: int, err: Any = None, *, log: Optional[Logger] = None) -> None:
    """Abort with `status` unless `condition` holds."""
    if not condition:
        _fail(status, err, log)


def assert_error_is_none(err: Optional[BaseException], *, log: Optional[Logger] = None) -> None:
    """Abort with 500 if `err` is set, carrying it as the cause.

        err = validate(payload)
        assert_error_is_none(err)
    """
    assert_error_is_none_with_status(INTERNAL_SERVER_ERROR, err, log=log)


def assert_error_is_none_with_status(status: int, err: Any, *, log: Optional[Logger] = None) -> None:
    if err is not None:
        _fail(status, err, log)
