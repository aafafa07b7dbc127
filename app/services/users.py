# app/services/users.py
import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.auth.passwords import hash_password, verify_password
from app.config import settings
from app.db.mongo import db
from app.utils.ids import new_id, now_iso

logger = logging.getLogger(__name__)

# Projections
PRIVATE_FIELDS = {"password": 0}                # caller's own profile
PUBLIC_FIELDS = {"password": 0, "email": 0}     # profile viewed by anyone
SEARCH_FIELDS = {"username": 1, "avatar": 1, "bio": 1}

SEARCH_LIMIT = 10


def _conflict_from(err: DuplicateKeyError) -> HTTPException:
    detail = "Email already registered" if "email" in str(err) else "Username already taken"
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def create_user(username: str, email: str, password: str) -> Dict[str, Any]:
    """
    Register a user. The password is stored only as a bcrypt hash.
    Returns the stored document without the hash.
    """
    email = email.lower()
    if db.users.find_one({"username": username}, {"_id": 1}):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
    if db.users.find_one({"email": email}, {"_id": 1}):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    now = now_iso()
    doc = {
        "_id": new_id("u"),
        "username": username,
        "email": email,
        "password": hash_password(password),
        "avatar": settings.default_avatar,
        "bio": "",
        "githubProfile": "",
        "portfolio": "",
        "created_at": now,
        "updated_at": now,
    }
    try:
        db.users.insert_one(doc)
    except DuplicateKeyError as e:
        # lost a race against a concurrent registration
        raise _conflict_from(e)

    logger.info(f"Registered user {doc['_id']} ({username})")
    doc.pop("password")
    return doc


def authenticate(email: str, password: str) -> Optional[Dict[str, Any]]:
    """Return the user (without hash) when the credentials match, else None."""
    user = db.users.find_one({"email": email.lower()})
    if not user or not verify_password(password, user.get("password", "")):
        return None
    user.pop("password", None)
    return user


def get_public_profile(user_id: str) -> Dict[str, Any]:
    user = db.users.find_one({"_id": user_id}, PUBLIC_FIELDS)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def update_profile(user: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply profile `changes` for `user`. A new username is checked for uniqueness
    only when it differs from the current one. The password is never touched here.
    """
    changes = {k: v for k, v in changes.items() if k != "password"}

    new_username = changes.get("username")
    if new_username and new_username != user.get("username"):
        taken = db.users.find_one({"username": new_username, "_id": {"$ne": user["_id"]}}, {"_id": 1})
        if taken:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    if changes:
        changes["updated_at"] = now_iso()
        try:
            db.users.update_one({"_id": user["_id"]}, {"$set": changes})
        except DuplicateKeyError as e:
            raise _conflict_from(e)
        logger.info(f"Updated profile of {user['_id']}: {sorted(k for k in changes if k != 'updated_at')}")

    return db.users.find_one({"_id": user["_id"]}, PRIVATE_FIELDS)


def search_users(query: str) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on username or bio."""
    pattern = re.escape(query)
    cur = db.users.find(
        {"$or": [
            {"username": {"$regex": pattern, "$options": "i"}},
            {"bio": {"$regex": pattern, "$options": "i"}},
        ]},
        SEARCH_FIELDS,
    ).limit(SEARCH_LIMIT)
    return list(cur)
