import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.db.session import create_db_engine, create_session_factory
from app.main import create_app
from app.services.response_store import InMemoryResponseStore, SqlResponseStore
from app.services.user_store import InMemoryUserStore, SqlUserStore


def _sample_answers(**overrides):
    answers = {
        "fiscalYear": "2023-24",
        "totalElectricityKwh": 120000,
        "renewableElectricityKwh": 30000,
        "totalFuelLiters": 5000,
        "carbonEmissionsTco2e": 800,
        "totalEmployees": 200,
        "femaleEmployees": 90,
        "avgTrainingHours": 12.5,
        "communityInvestmentInr": 1500000,
        "independentBoardPct": 40,
        "hasDataPrivacyPolicy": "Yes",
        "totalRevenueInr": 50000000,
    }
    answers.update(overrides)
    return answers


@pytest.fixture
def sample_answers():
    return _sample_answers


@pytest.fixture
def sqlite_session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'esg.db'}")
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def stores(request, sqlite_session_factory):
    """(user store, response store) for each backend; the contract must hold for both."""
    if request.param == "memory":
        return InMemoryUserStore(), InMemoryResponseStore()
    return SqlUserStore(sqlite_session_factory), SqlResponseStore(sqlite_session_factory)


@pytest.fixture
def response_store(stores):
    return stores[1]


@pytest.fixture
def make_user(stores):
    users = stores[0]

    def _make(email="owner@example.com", name="Owner"):
        return users.create(name, email, "not-a-real-hash")

    return _make


@pytest.fixture
def client():
    app = create_app(Settings(database_url=None, cookie_secure=False, jwt_secret="test-secret"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sql_client(tmp_path):
    app = create_app(
        Settings(
            database_url=f"sqlite:///{tmp_path / 'api.db'}",
            cookie_secure=False,
            jwt_secret="test-secret",
        )
    )
    with TestClient(app) as c:
        yield c


def register_and_login(client, email="asha@example.com", password="s3cret-pass", name="Asha"):
    r = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert r.status_code == 200, r.text
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def auth_client(client):
    return register_and_login(client)
