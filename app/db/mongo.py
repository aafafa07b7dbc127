# app/db/mongo.py
import os
from pymongo import MongoClient, ASCENDING, DESCENDING

from app.config import settings


# Lazy initialization - don't connect at import time
_client = None
_db = None
_indexes_created = False

def get_client():
    """Get or create the MongoDB client."""
    global _client
    if _client is None:
        # Check if we're in testing mode
        if os.getenv("TESTING") == "1":
            import mongomock
            _client = mongomock.MongoClient()
        else:
            _client = MongoClient(settings.mongo_uri)
    return _client

def get_db():
    """Get or create the MongoDB database."""
    global _db
    if _db is None:
        _db = get_client()[settings.mongo_db]
    return _db

# Make db available as module attribute
class _LazyDB:
    def __getattr__(self, name):
        return getattr(get_db(), name)

db = _LazyDB()

def ensure_indexes():
    """Create all necessary indexes. Safe to call multiple times."""
    global _indexes_created
    if _indexes_created:
        return

    _db = get_db()

    # ---- Users: uniqueness is enforced here, not only by the route pre-checks ----
    _db.users.create_index([("username", ASCENDING)], unique=True, name="users_username_unique")
    _db.users.create_index([("email", ASCENDING)], unique=True, name="users_email_unique")

    # ---- Projects ----
    _db.projects.create_index([("created_at", DESCENDING)], name="projects_created_desc")
    _db.projects.create_index(
        [("author", ASCENDING), ("created_at", DESCENDING)],
        name="projects_by_author",
    )

    # ---- Comments ----
    # Top-level listing: (project, parentComment=None) newest first
    _db.comments.create_index(
        [("project", ASCENDING), ("parentComment", ASCENDING), ("created_at", DESCENDING)],
        name="comments_by_project_parent",
    )
    # Cascade deletes of replies
    _db.comments.create_index([("parentComment", ASCENDING)], name="comments_by_parent")

    _indexes_created = True
