import pytest

from planpoker.config import Config
from planpoker.game import service
from planpoker.realtime import session as sessions
from planpoker.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    FRONTEND_DIR = "/nonexistent"


@pytest.fixture(autouse=True)
def clean_registry():
    service.clear_rooms()
    sessions.clear_sessions()
    yield
    service.clear_rooms()
    sessions.clear_sessions()


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app, socketio):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _connect
    for c in clients:
        if c.is_connected():
            c.disconnect()
