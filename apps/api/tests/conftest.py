import pytest
from fastapi.testclient import TestClient

from access_api.main import create_app
from access_api.core.config import Settings
from access_api.models.user import User, MANAGER
from factories import make_software, make_user


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        AUTO_DB_BOOTSTRAP=True,
        JWT_SECRET="test-secret",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin123",
        ALLOW_SIGNUP_ROLE=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(client, app):
    db = app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def alice(session):
    return make_user(session, "alice")


@pytest.fixture
def carol(session):
    return make_user(session, "carol")


@pytest.fixture
def bob(session):
    return make_user(session, "bob", role=MANAGER)


@pytest.fixture
def admin(session):
    # Seeded at startup from ADMIN_USERNAME / ADMIN_PASSWORD.
    return session.query(User).filter(User.username == "admin").one()


@pytest.fixture
def crm(session):
    return make_software(session, "CRM", ["Read", "Write"], description="Customer relationship management")
