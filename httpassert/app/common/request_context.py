from __future__ import annotations

import threading
import uuid
from typing import Optional

from werkzeug.wrappers import Request

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_KEY = "httpassert.request_id"
_SCOPE_KEY = "httpassert.cancel_scope"


def init_request_id(request: Request, header: str = REQUEST_ID_HEADER) -> str:
    rid = request.environ.get(_REQUEST_ID_KEY)
    if rid is None:
        rid = request.headers.get(header) or str(uuid.uuid4())
        request.environ[_REQUEST_ID_KEY] = rid
    return rid


class CancelScope:
    """Per-request cancellation token.

    `cancel()` may be called any number of times; `release()` marks the end
    of the request and is expected exactly once.
    """

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._released = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def released(self) -> bool:
        return self._released

    def cancel(self) -> None:
        self._cancelled.set()

    def release(self) -> None:
        if self._released:
            raise RuntimeError("cancel scope released twice")
        self._released = True


def open_scope(request: Request) -> CancelScope:
    scope = CancelScope()
    request.environ[_SCOPE_KEY] = scope
    return scope


def current_scope(request: Request) -> Optional[CancelScope]:
    return request.environ.get(_SCOPE_KEY)
