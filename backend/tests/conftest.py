import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the backend root (containing the `arcade` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arcade import bcrypt, create_app, db
from arcade.services import CredentialStore, ScoreLedger, SessionAuthority


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_TOKEN_SECRET = 'test-signing-secret'
    SESSION_TOKEN_ALGORITHM = 'HS256'
    SESSION_TOKEN_EXPIRES_SEC = 3600
    SESSION_TOKEN_COOKIE = 'token'
    # Minimum bcrypt cost keeps the suite fast
    BCRYPT_LOG_ROUNDS = 4
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    CORS_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'WARNING'


class FakeClock:
    """Clock that returns `now` and then advances it by `step`."""

    def __init__(self, start, step):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now = self.now + self.step
        return value


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    # Cookies are passed explicitly so tests see exactly what the server set
    return flask_app.test_client(use_cookies=False)


@pytest.fixture()
def credentials(flask_app):
    return CredentialStore(db.session, bcrypt)


@pytest.fixture()
def ledger_clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0), timedelta(seconds=1))


@pytest.fixture()
def ledger(flask_app, ledger_clock):
    return ScoreLedger(db.session, clock=ledger_clock)


@pytest.fixture()
def sessions():
    return SessionAuthority('unit-test-secret', expires_in=60, clock=FakeClock(1_700_000_000, 0))


def session_cookie(response, name='token'):
    """Return the value of ``name`` from the response's Set-Cookie headers."""
    for header in response.headers.getlist('Set-Cookie'):
        key, _, rest = header.partition('=')
        if key == name:
            return rest.split(';', 1)[0]
    return None


def cookie_header(token, name='token'):
    return {'Cookie': f'{name}={token}'}
