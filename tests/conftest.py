import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from identity_store.db.base import Base
from identity_store.db.session import build_engine, get_db
from identity_store.main import app
from identity_store.models import user  # noqa: F401
from identity_store.repositories.user import UserRepository

# In-memory SQLite — isolated, no server required
_engine = build_engine("sqlite://", poolclass=StaticPool)
_TestingSession = sessionmaker(bind=_engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before every test so both counters restart at 1."""
    Base.metadata.drop_all(bind=_engine)
    Base.metadata.create_all(bind=_engine)
    yield
    Base.metadata.drop_all(bind=_engine)


@pytest.fixture
def db(reset_db):
    session = _TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo(db):
    return UserRepository(db)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def file_engine(tmp_path):
    """Empty file-backed SQLite database; real connections, real locking."""
    engine = build_engine(f"sqlite:///{tmp_path / 'identity.db'}")
    yield engine
    engine.dispose()


# ---------------------------------------------------------------------------
# Helpers re-used across multiple test modules
# ---------------------------------------------------------------------------

def create_user(client, one=None, two=None):
    r = client.post("/api/v1/users", json={"one": one, "two": two})
    assert r.status_code == 201, r.text
    return r.json()
