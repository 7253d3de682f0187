import os

# 应用在导入时读取配置，必须先于 switchhub_api 导入设置环境变量。
os.environ.setdefault("SH_AUTH_JWT_SECRET", "unit-test-secret-0123456789abcdef")
os.environ.setdefault("SH_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SH_AUTO_CREATE_SCHEMA", "false")

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from switchhub_api.core.config import get_settings  # noqa: E402
from switchhub_api.db.session import get_db  # noqa: E402
from switchhub_api.main import app  # noqa: E402
from switchhub_api.models import Base  # noqa: E402

TEST_SECRET = os.environ["SH_AUTH_JWT_SECRET"]


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    def _get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def signup(client: TestClient, *, name: str = "Ann", email: str = "Ann@X.com", password: str = "secret12", **extra):
    return client.post("/api/auth", json={"action": "signup", "name": name, "email": email, "password": password, **extra})


def login(client: TestClient, *, email: str = "ann@x.com", password: str = "secret12"):
    return client.post("/api/auth", json={"action": "login", "email": email, "password": password})
