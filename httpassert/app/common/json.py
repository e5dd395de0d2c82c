from __future__ import annotations

import logging
from typing import Any, Optional, Union

from flask import json as flask_json
from werkzeug.wrappers import Response

from httpassert.app.common.errors import HttpStatusError, ResponseAlreadyWritten, to_err

logger = logging.getLogger(__name__)

Logger = Union[logging.Logger, logging.LoggerAdapter]

INTERNAL_SERVER_ERROR_MESSAGE = "internal server error"

_WRITTEN_ATTR = "_httpassert_written"


def is_written(response: Response) -> bool:
    return getattr(response, _WRITTEN_ATTR, False)


def _write(response: Response, status: int, payload: Any, nosniff: bool = False) -> Response:
    data = flask_json.dumps(payload) + "\n"
    if is_written(response):
        raise ResponseAlreadyWritten("response has already been written")
    setattr(response, _WRITTEN_ATTR, True)
    if nosniff:
        response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Content-Type"] = "application/json"
    response.status_code = status
    response.set_data(data)
    return response


def json_with_status(response: Response, status: int, payload: Any) -> Response:
    """Write `payload` as-is, without the {ok, message} envelope."""
    return _write(response, status, payload, nosniff=True)


def json(response: Response, payload: Any) -> Response:
    return json_with_status(response, 200, payload)


def ok(response: Response) -> Response:
    return json_with_status(response, 200, {"ok": True})


def message_with_status(response: Response, status: int, text: str) -> Response:
    return json_with_status(response, status, {"ok": True, "message": text})


def message(response: Response, text: str) -> Response:
    return message_with_status(response, 200, text)


def error_with_status(response: Response, status: int, err: Any, *, log: Optional[Logger] = None) -> Response:
    """Write the error envelope. The error's message reaches the client verbatim,
    so only use this with text that is safe to expose."""
    cause = to_err(err)
    if isinstance(cause, HttpStatusError):
        cause = cause.cause
    level = logging.ERROR if status >= 500 else logging.WARNING
    (log or logger).log(level, "failed status=%s error=%s", status, cause, extra={"status": status})
    return _write(response, status, {"ok": False, "message": str(cause)})


def error(response: Response, err: Any, *, log: Optional[Logger] = None) -> Response:
    return error_with_status(response, 500, err, log=log)


def _cause_chain(err: BaseException) -> list[str]:
    chain = []
    seen = {id(err)}
    current: Optional[BaseException] = err
    while current is not None:
        if isinstance(current, HttpStatusError):
            nxt = current.cause
        else:
            nxt = current.__cause__ or current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        chain.append(f"{type(nxt).__name__}: {nxt}")
        current = nxt
    return chain


def internal_error_with_status(
    response: Response, status: int, err: BaseException, *, log: Optional[Logger] = None
) -> Response:
    """Log `err` with its cause chain; the client only sees a generic message."""
    if not isinstance(err, BaseException):
        err = to_err(err)
    chain = _cause_chain(err)
    if chain:
        (log or logger).error(
            "internal error: %s cause=%s", err, " <- ".join(chain), extra={"status": status}
        )
    else:
        (log or logger).error("internal error: %s", err, extra={"status": status})
    return _write(response, status, {"ok": False, "message": INTERNAL_SERVER_ERROR_MESSAGE})


def internal_error(response: Response, err: BaseException, *, log: Optional[Logger] = None) -> Response:
    return internal_error_with_status(response, 500, err, log=log)
