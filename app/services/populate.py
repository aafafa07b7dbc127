# app/services/populate.py
from typing import Any, Dict, Iterable, List

from app.db.mongo import db

# Author fields attached to list items
AUTHOR_SUMMARY = {"username": 1, "avatar": 1}
# Author fields attached to a single project view
AUTHOR_PROFILE = {"username": 1, "avatar": 1, "bio": 1, "githubProfile": 1, "portfolio": 1}


def attach_authors(docs: Iterable[Dict[str, Any]], fields: Dict[str, int] = AUTHOR_SUMMARY) -> List[Dict[str, Any]]:
    """
    Replace each doc's `author` id with the author's user document, limited to `fields`.
    One query for the whole batch. A dangling author id becomes None.
    """
    docs = list(docs)
    author_ids = list({d["author"] for d in docs if d.get("author")})
    if not author_ids:
        return docs
    users = {u["_id"]: u for u in db.users.find({"_id": {"$in": author_ids}}, fields)}
    for d in docs:
        d["author"] = users.get(d.get("author"))
    return docs
