import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TEAM_SIZE = 4
    SLOT_GAP_MIN = 30
    GUEST_ROLL = '1'
    NFC_READER_CMD = [sys.executable, '-c', 'import time; time.sleep(30)']
    SERIAL_PATH = 'TEST'
    BACKEND_URL = 'http://localhost:3000'
    LOG_LEVEL = 'DEBUG'


class FakeNow:
    """Controllable wall clock for the scheduler."""

    def __init__(self, hour=10, minute=0):
        self.current = datetime(2026, 10, 18, hour, minute)

    def __call__(self):
        return self.current

    def set(self, hour, minute):
        self.current = self.current.replace(hour=hour, minute=minute)

    def advance(self, minutes):
        self.current = self.current + timedelta(minutes=minutes)


@pytest.fixture()
def fake_now():
    return FakeNow()


@pytest.fixture()
def flask_app(fake_now):
    application = create_app(TestConfig, now=fake_now)
    with application.app_context():
        # Ensure models are imported so tables are created
        import arena.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def services(flask_app):
    return flask_app.extensions['arena']


@pytest.fixture()
def students(services):
    """Eight registered players, rolls R1..R8."""
    records = [
        {'roll': f'R{i}', 'name': f'Player {i}', 'email': f'p{i}@example.com', 'mobile': f'90000000{i}'}
        for i in range(1, 9)
    ]
    services.directory.import_records(records)
    return [r['roll'] for r in records]


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
