import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api import create_app  # noqa: E402

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture
def app(tmp_path):
    """Fresh app on its own SQLite file; nothing is shared between tests."""
    app = create_app(
        "testing",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'auth.db'}",
            "JWT_SECRET": TEST_SECRET,
            "LOG_LEVEL": "WARNING",
        },
    )
    yield app
    app.extensions["storage"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions["storage"]


@pytest.fixture
def tokens(app):
    return app.extensions["tokens"]


@pytest.fixture
def refresh_store(app):
    return app.extensions["refresh_tokens"]


@pytest.fixture
def credentials(app):
    return app.extensions["credentials"]


@pytest.fixture
def sessions(app):
    return app.extensions["sessions"]


@pytest.fixture
def alice(credentials):
    """A registered user and the session minted at registration."""
    return credentials.register("alice", "a@x.com", "password123")
