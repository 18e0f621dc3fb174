import itertools
import os
import tempfile
from types import SimpleNamespace

# must be set before config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["API_LOG_PATH"] = os.path.join(tempfile.gettempdir(), "travelbuddy-tests", "api.log")
os.environ["GMAIL_USER"] = ""
os.environ["GMAIL_PASS"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["RAPIDAPI_KEY"] = ""
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ.pop("GOOGLE_APPLICATION_CREDENTIALS", None)

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, get_db
from main import app
from models.User import User, UserType


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client, db_session):
    """Sign a user up through the API and return its id, token and auth headers."""
    counter = itertools.count(1)

    def _make(name=None, email=None, password="secret123", is_premium=False, admin=False, **profile):
        n = next(counter)
        name = name or f"User {n}"
        email = email or f"user{n}@example.com"
        resp = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        # the client keeps the auth cookie; tests pass headers explicitly
        client.cookies.clear()
        data = resp.json()

        if is_premium or admin or profile:
            user = db_session.query(User).filter(User.id == data["user"]["id"]).first()
            user.is_premium = is_premium
            if admin:
                user.type = UserType.ADMIN
            for key, value in profile.items():
                setattr(user, key, value)
            db_session.commit()

        return SimpleNamespace(
            id=data["user"]["id"],
            name=name,
            email=email,
            password=password,
            token=data["token"],
            headers={"Authorization": f"Bearer {data['token']}"},
        )

    return _make


@pytest.fixture
def make_blog(client):
    def _make(author, title="A trip to Lisbon", content="Trams, tiles and pastries.", **extra):
        resp = client.post(
            "/blogs", json={"title": title, "content": content, **extra}, headers=author.headers
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_trip(client, monkeypatch):
    monkeypatch.setattr("routes.trips.send_trip_creation_email", lambda *args, **kwargs: True)

    def _make(creator, **overrides):
        payload = {
            "destination": "Kyoto, Japan",
            "start_date": "2030-04-01",
            "end_date": "2030-04-10",
            "budget": 1500,
            "description": "Temples and gardens",
        }
        payload.update(overrides)
        resp = client.post("/trips", json=payload, headers=creator.headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
