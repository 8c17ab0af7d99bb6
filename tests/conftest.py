import mongomock
import pytest
from fastapi.testclient import TestClient

from database import create_document, ensure_indexes, get_db
from main import app
from security import hash_password, start_session


@pytest.fixture
def mongo_db():
    database = mongomock.MongoClient()["alternatives_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def client(mongo_db):
    app.dependency_overrides[get_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(mongo_db):
    def _make_user(email="user@example.com", name="Test User", role="user", password="correct-horse"):
        user = create_document(mongo_db, "user", {
            "email": email,
            "password_hash": hash_password(password),
            "name": name,
            "role": role,
            "email_verified": False,
        })
        token = start_session(mongo_db, str(user["_id"]))
        return user, {"Authorization": f"Bearer {token}"}
    return _make_user


@pytest.fixture
def make_alternative(mongo_db):
    counter = {"n": 0}

    def _make_alternative(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "name": f"Project {n}",
            "slug": f"project-{n}",
            "description": "An open source project",
            "short_description": "Open source",
            "website": f"https://project{n}.example.com",
            "github": f"https://github.com/example/project-{n}",
            "stars": 0,
            "forks": 0,
            "contributors": 0,
            "health_score": 50,
            "vote_score": 0,
            "featured": False,
            "approved": True,
            "status": "approved",
            "submission_plan": "free",
            "is_self_hosted": False,
            "license": "MIT",
            "user_id": None,
            "submitter_email": None,
            "last_edited_at": None,
            "github_synced_at": None,
            "categories": [],
            "tags": [],
            "tech_stacks": [],
            "alternative_to": [],
        }
        data.update(overrides)
        return create_document(mongo_db, "alternative", data)
    return _make_alternative
