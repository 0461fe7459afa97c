import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports the settings
_db_dir = tempfile.mkdtemp(prefix="budget-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTH_DEV_FALLBACK"] = "false"
os.environ["BOOTSTRAP_ADMIN_EMAILS"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from budget_api.db.base import Base  # noqa: E402
from budget_api.db.session import SessionLocal, engine  # noqa: E402
from budget_api.main import app  # noqa: E402
from budget_api.models.user import User  # noqa: E402
from budget_api.services.identity import IdentityError, IdentityProvider  # noqa: E402
from tests.utils import auth_headers  # noqa: E402


class FakeIdentityProvider(IdentityProvider):
    """Tokens look like 'token-<uid>'; anything else is rejected.

    The verified email for a uid defaults to '<uid>@example.com' and can be
    overridden through ``emails``.
    """

    def __init__(self):
        self.reset_requests = []
        self.fail_reset = False
        self.emails = {}

    def verify_claims(self, token: str) -> dict:
        if not token.startswith("token-") or len(token) == len("token-"):
            raise IdentityError("signature check failed")
        uid = token[len("token-"):]
        return {"uid": uid, "email": self.emails.get(uid, f"{uid}@example.com"), "email_verified": True}

    def generate_password_reset_link(self, email: str) -> str:
        if self.fail_reset:
            raise IdentityError("identity provider unavailable")
        self.reset_requests.append(email)
        return f"https://auth.example.com/reset?email={email}"


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def identity():
    provider = FakeIdentityProvider()
    app.state.identity = provider
    yield provider
    app.state.identity = None


@pytest.fixture
def client(identity):
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(client):
    def _make(uid, email=None, **extra):
        body = {"id": uid, "email": email or f"{uid}@example.com"}
        body.update(extra)
        # Signed-in clients send their own token along with the sync
        resp = client.post("/api/users/sync", json=body, headers=auth_headers(uid))
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_admin(make_user):
    def _make(uid="admin"):
        make_user(uid)
        with SessionLocal() as session:
            user = session.get(User, uid)
            user.is_admin = True
            session.commit()
        return uid
    return _make
