import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request, Response

from httpassert.app.factory import create_app


@pytest.fixture()
def app():
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def make_request():
    def _make(path="/", headers=None):
        return Request(EnvironBuilder(path=path, headers=headers).get_environ())

    return _make


@pytest.fixture()
def response():
    return Response()
