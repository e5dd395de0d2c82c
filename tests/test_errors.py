import pytest

from httpassert.app.common.errors import (
    MISSING_ERROR_DETAILS,
    HttpAbort,
    HttpStatusError,
    Text,
    Unspecified,
    Wrapped,
    abort,
    error_like,
    new_error,
    to_err,
)


def test_to_err_wraps_strings():
    err = to_err("boom")
    assert isinstance(err, Exception)
    assert str(err) == "boom"


def test_to_err_keeps_exceptions_as_is():
    original = ValueError("bad value")
    assert to_err(original) is original


@pytest.mark.parametrize("value", [None, 42, {"a": 1}, object()])
def test_to_err_falls_back_for_anything_else(value):
    assert str(to_err(value)) == MISSING_ERROR_DETAILS


def test_to_err_keeps_http_status_error_whole():
    err = HttpStatusError(404, KeyError("missing"))
    assert to_err(err) is err


def test_new_error_keeps_http_status_error_as_cause():
    inner = new_error(404, "gone")
    err = new_error(502, inner)
    assert err.status == 502
    assert err.cause is inner
    assert err.message == "gone"


def test_to_err_is_idempotent():
    once = to_err("boom")
    assert to_err(once) is once


def test_error_like_variants():
    assert error_like("x") == Text("x")
    err = RuntimeError("y")
    assert error_like(err) == Wrapped(err)
    assert error_like(None) == Unspecified()
    assert error_like(Text("z")) == Text("z")
    assert str(Unspecified().to_error()) == MISSING_ERROR_DETAILS


def test_new_error_exposes_status_message_and_cause():
    cause = ValueError("user not found")
    err = new_error(404, cause)

    assert err.status == 404
    assert err.message == "user not found"
    assert err.cause is cause
    assert str(err) == "user not found"


def test_new_error_without_details():
    err = new_error(500)
    assert err.message == MISSING_ERROR_DETAILS


def test_http_status_error_is_read_only():
    err = new_error(400, "bad")
    with pytest.raises(AttributeError):
        err.status = 500
    with pytest.raises(AttributeError):
        err.cause = ValueError("other")


def test_abort_raises_signal_past_except_exception():
    reached = []

    def handler():
        try:
            abort(409, "conflict")
        except Exception:
            reached.append("swallowed")

    with pytest.raises(HttpAbort) as info:
        handler()

    assert reached == []
    assert info.value.error.status == 409
    assert info.value.error.message == "conflict"
