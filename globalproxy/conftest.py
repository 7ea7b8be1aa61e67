import pytest
from fastapi.testclient import TestClient

from globalproxy.utils_tests.upstream_mock import UpstreamRecorder


@pytest.fixture
def upstream(monkeypatch):
    """Route every upstream dispatch to an in-memory recorder instead of the network."""
    recorder = UpstreamRecorder()

    from globalproxy.proxy import route

    monkeypatch.setattr(route, "create_upstream_client", recorder.client_factory)
    return recorder


@pytest.fixture(scope="session")
def app():
    from globalproxy.server import app

    return app


@pytest.fixture
def https_client(app):
    """Client reaching the proxy over https, as it runs behind the edge."""
    with TestClient(app, base_url="https://proxy.example.com") as client:
        yield client


@pytest.fixture
def http_client(app):
    with TestClient(app, base_url="http://proxy.example.com") as client:
        yield client
