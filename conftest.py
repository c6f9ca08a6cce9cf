import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.config import TEST_DATABASE_URL
from app.database import get_db, Base, make_engine
from app.main import app

# TEST_DATABASE_URL may point at a Postgres test DB; defaults to a local sqlite file
engine = make_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Override the app's DB dependency to use the test engine/session
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_profile(client):
    def _make(user_id="user-1", name="Ana Souza", plan="basic"):
        response = client.post("/profiles", json={"user_id": user_id, "name": name, "plan": plan})
        assert response.status_code == 201
        return response.json()
    return _make


@pytest.fixture
def make_benefit(client):
    def _make(**overrides):
        data = {
            "title": "Pizza 2x1",
            "description": "Two pizzas for the price of one",
            "category": "gastronomia",
            "plan_required": "basic",
            "discount_percentage": 50,
            "original_price": 80.0,
            "partner_name": "Pizzaria Bella",
        }
        data.update(overrides)
        response = client.post("/benefits", json=data)
        assert response.status_code == 201
        return response.json()
    return _make
