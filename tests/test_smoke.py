from httpassert.app.common.asserts import assert_with_status
from httpassert.app.common.recovery import recoverable
from httpassert.app.config import Config
from httpassert.app.factory import create_app


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json == {"ok": True}
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    r = client.get("/health")
    assert r.headers["X-Request-ID"]


def test_custom_request_id_header_on_error_response():
    class TraceConfig(Config):
        REQUEST_ID_HEADER = "X-Trace-ID"

    app = create_app(TraceConfig)

    @app.get("/missing")
    @recoverable
    def missing():
        assert_with_status(False, 404, "nothing here")

    with app.test_client() as c:
        r = c.get("/missing", headers={"X-Trace-ID": "t1"})

    assert r.status_code == 404
    assert r.json == {"ok": False, "message": "nothing here"}
    assert r.headers["X-Trace-ID"] == "t1"
    assert "X-Request-ID" not in r.headers
