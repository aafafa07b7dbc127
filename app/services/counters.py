# app/services/counters.py
"""
Denormalized counters on projects and comments.

`likesCount` is moved together with the `likes` list in one single-document update
whose filter asserts the current membership, so concurrent toggles from different
users cannot lose updates. The post-update list size is then compared with the
stored count and written back when they differ, so a drifted count heals on the
next toggle.

`commentsCount` on a project is maintained incrementally by the comment
create/delete paths. A failure between a comment write and the counter write
leaves the counter stale; `recount_project` rebuilds both counters from the
source collections.
"""
import logging
from typing import Any, Dict

from fastapi import HTTPException
from pymongo import ReturnDocument
from pymongo.collection import Collection

from app.db.mongo import db
from app.utils.ids import now_iso

logger = logging.getLogger(__name__)

# A toggle only fails to match when the same user toggles concurrently
_TOGGLE_ATTEMPTS = 3


def _sync_likes_count(collection: Collection, doc: Dict[str, Any]) -> int:
    """
    Write len(likes) from the post-update document back to likesCount. The write is
    guarded on the list still having that size, so a concurrent toggle that already
    changed the list is left to write its own size.
    """
    size = len(doc.get("likes", []))
    if doc.get("likesCount") != size:
        collection.update_one(
            {"_id": doc["_id"], "likes": {"$size": size}},
            {"$set": {"likesCount": size}},
        )
    return size


def toggle_like(collection: Collection, doc_id: str, user_id: str, not_found: str = "Not found") -> Dict[str, Any]:
    """
    Like `doc_id` for `user_id` if not yet liked, otherwise unlike it.

    likesCount is set to the size of the post-update `likes` list, so a count
    that drifted earlier is corrected by the next toggle.

    Returns {"liked": bool, "likesCount": int} reflecting the post-update document.
    Raises 404 with `not_found` when the document does not exist.
    """
    projection = {"likes": 1, "likesCount": 1}
    for _ in range(_TOGGLE_ATTEMPTS):
        doc = collection.find_one_and_update(
            {"_id": doc_id, "likes": {"$ne": user_id}},
            {"$push": {"likes": user_id}, "$inc": {"likesCount": 1}, "$set": {"updated_at": now_iso()}},
            projection=projection,
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            return {"liked": True, "likesCount": _sync_likes_count(collection, doc)}

        doc = collection.find_one_and_update(
            {"_id": doc_id, "likes": user_id},
            {"$pull": {"likes": user_id}, "$inc": {"likesCount": -1}, "$set": {"updated_at": now_iso()}},
            projection=projection,
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            return {"liked": False, "likesCount": _sync_likes_count(collection, doc)}

        if collection.find_one({"_id": doc_id}, {"_id": 1}) is None:
            raise HTTPException(status_code=404, detail=not_found)

    logger.warning(f"Like toggle on {collection.name}/{doc_id} by {user_id} kept racing; giving up")
    raise HTTPException(status_code=409, detail="Like state changed concurrently, please retry")


def adjust_comments_count(project_id: str, delta: int) -> None:
    """Add `delta` (may be negative) to the project's commentsCount."""
    res = db.projects.update_one({"_id": project_id}, {"$inc": {"commentsCount": delta}})
    if not res.matched_count:
        logger.warning(f"commentsCount {delta:+d} skipped: project {project_id} not found")


def recount_project(project_id: str) -> Dict[str, Any]:
    """
    Rebuild likesCount / commentsCount for a project and likesCount for its comments
    from the authoritative like lists and comment collection.
    """
    prj = db.projects.find_one({"_id": project_id}, {"likes": 1, "likesCount": 1, "commentsCount": 1})
    if not prj:
        raise HTTPException(status_code=404, detail="Project not found")

    likes = len(prj.get("likes", []))
    comments = db.comments.count_documents({"project": project_id})
    fixed = {}
    if prj.get("likesCount") != likes:
        fixed["likesCount"] = likes
    if prj.get("commentsCount") != comments:
        fixed["commentsCount"] = comments
    if fixed:
        db.projects.update_one({"_id": project_id}, {"$set": fixed})
        logger.info(f"Repaired counters on project {project_id}: {fixed}")

    comments_fixed = 0
    for c in db.comments.find({"project": project_id}, {"likes": 1, "likesCount": 1}):
        n = len(c.get("likes", []))
        if c.get("likesCount") != n:
            db.comments.update_one({"_id": c["_id"]}, {"$set": {"likesCount": n}})
            comments_fixed += 1

    return {
        "project_id": project_id,
        "likesCount": likes,
        "commentsCount": comments,
        "project_fixed": sorted(fixed),
        "comments_fixed": comments_fixed,
    }
