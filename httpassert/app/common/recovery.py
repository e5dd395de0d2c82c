"""Recovery boundary for handlers that use the assertion helpers.

The boundary catches `HttpAbort` raised anywhere below it and writes one
JSON error response:

- status >= 500: generic "internal server error" body, details logged only;
- status < 500: the error message is sent to the client verbatim.

Anything else is logged and re-raised unchanged; turning it into a response
is left to the caller (Flask, the WSGI server, ...).
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from flask import current_app, request as flask_request
from werkzeug.wrappers import Request, Response

from httpassert.app.common.errors import HttpAbort, HttpStatusError
from httpassert.app.common.json import error_with_status, internal_error_with_status, is_written
from httpassert.app.common.request_context import REQUEST_ID_HEADER, init_request_id, open_scope

logger = logging.getLogger(__name__)

Logger = Union[logging.Logger, logging.LoggerAdapter]
Handler = Callable[[Request, Response], None]
F = TypeVar("F", bound=Callable[..., Any])

INTERNAL_SERVER_ERROR = 500


class RequestLogAdapter(logging.LoggerAdapter):
    """Appends the request id to every message."""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return f"{msg} request_id={self.extra['request_id']}", kwargs


def _dispatch(response: Response, err: HttpStatusError, log: Logger, request_id: str,
              header: str = REQUEST_ID_HEADER) -> None:
    if is_written(response):
        log.error("response already written, dropping status=%s error=%s", err.status, err)
        return
    response.headers[header] = request_id
    if err.status >= INTERNAL_SERVER_ERROR:
        internal_error_with_status(response, err.status, err, log=log)
    else:
        error_with_status(response, err.status, err, log=log)


def _run(request: Request, log: Optional[Logger], call: Callable[[], Any],
         respond: Callable[[HttpStatusError, Logger, str], Any], header: str = REQUEST_ID_HEADER) -> Any:
    request_id = init_request_id(request, header)
    request_log = RequestLogAdapter(log or logger, {"request_id": request_id})
    scope = open_scope(request)
    try:
        return call()
    except HttpAbort as abort:
        scope.cancel()
        return respond(abort.error, request_log, request_id)
    except Exception:
        request_log.exception("unexpected failure in handler")
        raise
    finally:
        scope.release()


def recoverer(handler: Handler, *, log: Optional[Logger] = None, header: str = REQUEST_ID_HEADER) -> Handler:
    """Wrap `handler(request, response)`, returning a handler with the same signature.

    Example::

        def get_user(request, response):
            user = users.get(request.args.get("id"))
            assert_with_status(user is not None, 404, "user not found")
            json(response, user)

        application = as_wsgi(get_user)
    """

    @wraps(handler)
    def wrapper(request: Request, response: Response) -> None:
        def respond(err, request_log, request_id):
            _dispatch(response, err, request_log, request_id, header)

        _run(request, log, lambda: handler(request, response), respond, header)

    return wrapper


def as_wsgi(handler: Handler, *, log: Optional[Logger] = None,
            header: str = REQUEST_ID_HEADER) -> Callable[..., Iterable[bytes]]:
    """Serve `handler` as a WSGI application behind the recovery boundary."""
    wrapped = recoverer(handler, log=log, header=header)

    def application(environ, start_response):
        request = Request(environ)
        response = Response()
        wrapped(request, response)
        response.headers[header] = init_request_id(request, header)
        return response(environ, start_response)

    return application


def recoverable(view: Optional[F] = None, *, log: Optional[Logger] = None):
    """Flask view decorator applying the recovery boundary.

    Usable bare (``@recoverable``) or with a logger (``@recoverable(log=...)``).
    The request id header name comes from the app's ``REQUEST_ID_HEADER`` setting.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            header = current_app.config.get("REQUEST_ID_HEADER", REQUEST_ID_HEADER)

            def respond(err, request_log, request_id):
                response = current_app.response_class()
                _dispatch(response, err, request_log, request_id, header)
                return response

            return _run(flask_request, log, lambda: fn(*args, **kwargs), respond, header)

        return wrapper  # type: ignore

    if view is not None:
        return decorator(view)
    return decorator
