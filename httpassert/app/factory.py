from __future__ import annotations

import logging

from flask import Flask, g, request

from httpassert.app.config import Config
from httpassert.app.common.json import ok
from httpassert.app.common.recovery import recoverable
from httpassert.app.common.request_context import init_request_id

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config["LOG_LEVEL"])

    # Request id
    @app.before_request
    def _before_request():
        g.request_id = init_request_id(request, app.config["REQUEST_ID_HEADER"])

    @app.after_request
    def _after_request(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers[app.config["REQUEST_ID_HEADER"]] = rid
        return response

    # Health endpoint
    @app.get("/health")
    @recoverable
    def health():
        return ok(app.response_class())

    return app
