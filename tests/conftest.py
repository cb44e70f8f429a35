"""
Shared fixtures for the login portal tests
"""
import pytest

from login_portal.app import create_app
from login_portal.database import insert_account_if_absent


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "users.db")


@pytest.fixture
def make_app(db_path):
    """Build an app on a temp database; ``accounts`` maps username to password."""
    def _make(allow_username_only=False, accounts=None, seed=("admin", "")):
        app = create_app({
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "DATABASE_PATH": db_path,
            "ALLOW_USERNAME_ONLY": allow_username_only,
            "SEED_USERNAME": seed[0] if seed else "",
            "SEED_PASSWORD": seed[1] if seed else "",
        })
        for username, password in (accounts or {}).items():
            insert_account_if_absent(username, password, db_path)
        return app
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


class StubLookup:
    """Account lookup stand-in that records every call."""
    def __init__(self, accounts=None, error=None):
        self.accounts = {a.username: a for a in (accounts or [])}
        self.error = error
        self.calls = []

    def __call__(self, identifier):
        self.calls.append(identifier)
        if self.error is not None:
            raise self.error
        return self.accounts.get(identifier)


@pytest.fixture
def stub_lookup():
    return StubLookup
