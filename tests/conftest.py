import os
import pytest
import mongomock
from fastapi.testclient import TestClient
from datetime import datetime, timezone, timedelta
import jwt as pyjwt

# === Configure env BEFORE any imports ===
os.environ["TESTING"] = "1"
os.environ.setdefault("MONGO_DB", "devshowcase_test")
os.environ.setdefault("JWT_SECRET", "dev-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

@pytest.fixture(scope="session")
def app_instance():
    """Import app after environment is configured."""
    from app.main import app
    return app

@pytest.fixture(autouse=True)
def patch_db(monkeypatch):
    """Point every collection access at a fresh mongomock database."""
    import app.db.mongo as mongo_mod

    # Reset the module's global state for each test
    mongo_mod._client = None
    mongo_mod._db = None
    mongo_mod._indexes_created = False

    mock_client = mongomock.MongoClient()
    mock_db = mock_client[os.getenv("MONGO_DB", "devshowcase_test")]

    monkeypatch.setattr(mongo_mod, "get_client", lambda: mock_client)
    monkeypatch.setattr(mongo_mod, "get_db", lambda: mock_db)

    # Unique username/email indexes must exist for conflict tests
    mongo_mod.ensure_indexes()

    yield mock_db

@pytest.fixture
def db(patch_db):
    return patch_db

@pytest.fixture
def client(app_instance):
    """Test client for making HTTP requests."""
    return TestClient(app_instance)

# === Auth helpers ===
def _token_for(sub):
    """Generate a JWT token for testing."""
    return pyjwt.encode(
        {"sub": sub},
        os.getenv("JWT_SECRET", "dev-secret"),
        algorithm="HS256"
    )

def _ts(offset_s=0):
    return (datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=offset_s)).isoformat()

@pytest.fixture
def make_user(db):
    """Insert a user directly and return (user_id, auth headers)."""
    def _make(username, email=None, password_hash="x", bio=""):
        uid = f"u_{username}"
        db.users.insert_one({
            "_id": uid,
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password_hash,
            "avatar": "https://example.com/a.png",
            "bio": bio,
            "githubProfile": "",
            "portfolio": "",
            "created_at": _ts(),
            "updated_at": _ts(),
        })
        return uid, {"Authorization": f"Bearer {_token_for(uid)}"}
    return _make

@pytest.fixture
def alice(make_user):
    return make_user("alice")

@pytest.fixture
def bob(make_user):
    return make_user("bob")

@pytest.fixture
def carol(make_user):
    return make_user("carol")

# === Seed a project ===
@pytest.fixture
def make_project(db):
    def _make(author_id, pid="p_demo", offset_s=0, **extra):
        doc = {
            "_id": pid,
            "title": "Demo",
            "description": "Demo project",
            "image": "https://example.com/demo.png",
            "githubUrl": "https://github.com/example/demo",
            "liveUrl": None,
            "tags": ["web", "api"],
            "author": author_id,
            "likes": [],
            "likesCount": 0,
            "commentsCount": 0,
            "created_at": _ts(offset_s),
            "updated_at": _ts(offset_s),
        }
        doc.update(extra)
        db.projects.insert_one(doc)
        return pid
    return _make

@pytest.fixture
def seeded_project(alice, make_project):
    """A project authored by alice."""
    return make_project(alice[0])
