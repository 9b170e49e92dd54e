import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weather_widgets.api.dependencies import get_db
from weather_widgets.crud import crud_widget
from weather_widgets.main import app
from weather_widgets.models.base import BaseModel


def setup_db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    return Session


@pytest.fixture
def client():
    setup_db()
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


def test_create_widget_normalizes_location(client):
    res = client.post("/widgets", json={"location": "  new YORK "})
    assert res.status_code == 201
    data = res.json()
    assert data["location"] == "New York"
    assert isinstance(data["id"], int)
    assert "createdAt" in data


@pytest.mark.parametrize(
    "body",
    [None, {}, {"location": ""}, {"location": "   "}, {"location": 42}, {"location": ["x"]}],
)
def test_create_widget_rejects_bad_location(client, body):
    res = client.post("/widgets", json=body) if body is not None else client.post("/widgets")
    assert res.status_code == 400
    assert res.json() == {"error": "Location is required and must be a non-empty string"}
    assert client.get("/widgets").json() == []


def test_create_widget_rejects_long_location(client):
    res = client.post("/widgets", json={"location": "a" * 101})
    assert res.status_code == 400
    assert res.json() == {"error": "Location cannot exceed 100 characters"}


def test_create_widget_accepts_max_length(client):
    res = client.post("/widgets", json={"location": "a" * 100})
    assert res.status_code == 201


def test_duplicate_widget_in_any_casing_conflicts(client):
    assert client.post("/widgets", json={"location": "berlin"}).status_code == 201

    for variant in ["berlin", "BERLIN", "  Berlin  "]:
        res = client.post("/widgets", json={"location": variant})
        assert res.status_code == 409
        assert res.json() == {"error": "Widget already exists"}

    assert len(client.get("/widgets").json()) == 1


def test_duplicate_insert_race_is_conflict(client, monkeypatch):
    assert client.post("/widgets", json={"location": "paris"}).status_code == 201

    # Skip the pre-check so the unique index has to catch it
    monkeypatch.setattr(crud_widget, "get_widget_by_location", lambda db, location: None)
    res = client.post("/widgets", json={"location": "PARIS"})
    assert res.status_code == 409
    assert res.json() == {"error": "Widget already exists"}


def test_list_widgets_newest_first(client):
    for city in ["berlin", "paris", "tokyo"]:
        assert client.post("/widgets", json={"location": city}).status_code == 201

    res = client.get("/widgets")
    assert res.status_code == 200
    assert [w["location"] for w in res.json()] == ["Tokyo", "Paris", "Berlin"]


def test_list_widgets_empty(client):
    res = client.get("/widgets")
    assert res.status_code == 200
    assert res.json() == []


def test_get_widget_by_id(client):
    created = client.post("/widgets", json={"location": "oslo"}).json()

    res = client.get(f"/widgets/{created['id']}")
    assert res.status_code == 200
    assert res.json() == created


def test_get_missing_widget(client):
    res = client.get("/widgets/999")
    assert res.status_code == 404
    assert res.json() == {"error": "Widget not found"}


@pytest.mark.parametrize(
    "widget_id",
    ["abc", "12x", "-1", "%C2%B2", "\u0661", "9" * 30, str(2**63)],
)
def test_malformed_widget_id(client, widget_id):
    assert client.get(f"/widgets/{widget_id}").status_code == 400
    res = client.delete(f"/widgets/{widget_id}")
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid widget ID format"}


def test_delete_widget(client):
    created = client.post("/widgets", json={"location": "lima"}).json()

    res = client.delete(f"/widgets/{created['id']}")
    assert res.status_code == 204
    assert res.content == b""

    assert client.get(f"/widgets/{created['id']}").status_code == 404
    again = client.delete(f"/widgets/{created['id']}")
    assert again.status_code == 404
    assert again.json() == {"error": "Widget not found"}


def test_deleted_location_can_be_added_again(client):
    created = client.post("/widgets", json={"location": "rome"}).json()
    client.delete(f"/widgets/{created['id']}")

    res = client.post("/widgets", json={"location": "Rome"})
    assert res.status_code == 201
