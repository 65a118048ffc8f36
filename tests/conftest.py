import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from riskboard.api.deps import db
from riskboard.core.security import create_access_token, hash_password
from riskboard.db.base import Base
from riskboard.main import app
from riskboard.models.user import User

ADMIN_EMAIL = "admin@riskboard.test"
ADMIN_PASS = "admin-pass"


@pytest.fixture()
def api_engine():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def api_session(api_engine):
    Session = sessionmaker(bind=api_engine, autoflush=False, autocommit=False, future=True)
    s = Session()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(api_engine):
    Session = sessionmaker(bind=api_engine, autoflush=False, autocommit=False, future=True)

    def _db():
        s = Session()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[db] = _db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def admin_user(api_session):
    u = User(email=ADMIN_EMAIL, name="Admin", password_hash=hash_password(ADMIN_PASS), role="admin", status="active")
    api_session.add(u)
    api_session.commit()
    api_session.refresh(u)
    return u


@pytest.fixture()
def admin_headers(admin_user):
    token = create_access_token(sub=admin_user.email, role="admin", uid=admin_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_headers():
    token = create_access_token(sub="analyst@riskboard.test", role="user")
    return {"Authorization": f"Bearer {token}"}
