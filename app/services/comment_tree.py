# app/services/comment_tree.py
"""
Two-level comment tree: top-level comments hold a `replies` id list, replies hold a
single `parentComment` id. A reply's parent is always top-level.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException

from app.db.mongo import db
from app.deps import Pagination
from app.services.counters import adjust_comments_count
from app.services.populate import attach_authors
from app.utils.ids import new_id, now_iso

logger = logging.getLogger(__name__)


def create_comment(
    *,
    content: str,
    author_id: str,
    project_id: str,
    parent_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Insert a comment (or a reply when `parent_id` is given), link it into the
    parent's `replies` and bump the project's commentsCount by one.

    Raises:
        404: project or parent comment not found (nothing is written)
        400: parent is itself a reply, or belongs to another project
    """
    if not db.projects.find_one({"_id": project_id}, {"_id": 1}):
        raise HTTPException(status_code=404, detail="Project not found")

    if parent_id:
        parent = db.comments.find_one({"_id": parent_id}, {"project": 1, "parentComment": 1})
        if not parent:
            raise HTTPException(status_code=404, detail="Parent comment not found")
        if parent.get("parentComment"):
            raise HTTPException(status_code=400, detail="Cannot reply to a reply")
        if parent.get("project") != project_id:
            raise HTTPException(status_code=400, detail="Parent comment belongs to a different project")

    now = now_iso()
    doc = {
        "_id": new_id("c"),
        "content": content,
        "author": author_id,
        "project": project_id,
        "parentComment": parent_id or None,
        "replies": [],
        "likes": [],
        "likesCount": 0,
        "created_at": now,
        "updated_at": now,
    }
    db.comments.insert_one(doc)

    if parent_id:
        db.comments.update_one({"_id": parent_id}, {"$push": {"replies": doc["_id"]}})

    adjust_comments_count(project_id, 1)
    logger.info(f"Comment {doc['_id']} created on project {project_id} (parent={parent_id})")
    return doc


def delete_comment(comment: Dict[str, Any]) -> int:
    """
    Delete a comment together with its replies, unlink it from its parent and
    decrement the project's commentsCount by the number of comments removed.
    Returns that number.
    """
    cid = comment["_id"]

    replies_deleted = int(db.comments.delete_many({"parentComment": cid}).deleted_count or 0)

    parent_id = comment.get("parentComment")
    if parent_id:
        db.comments.update_one({"_id": parent_id}, {"$pull": {"replies": cid}})

    db.comments.delete_one({"_id": cid})

    removed = replies_deleted + 1
    adjust_comments_count(comment["project"], -removed)
    logger.info(f"Comment {cid} deleted with {replies_deleted} replies")
    return removed


def delete_project_comments(project_id: str) -> int:
    """Remove every comment and reply attached to a project."""
    return int(db.comments.delete_many({"project": project_id}).deleted_count or 0)


def list_top_level(project_id: str, pagination: Pagination) -> Tuple[List[Dict[str, Any]], int]:
    """
    Page of top-level comments for a project, newest first, each with its replies
    expanded in the order they were posted and every author reduced to a summary.
    """
    filt = {"project": project_id, "parentComment": None}
    cur = (
        db.comments.find(filt)
        .sort("created_at", -1)
        .skip(pagination.skip)
        .limit(pagination.limit)
    )
    comments = list(cur)
    total = db.comments.count_documents(filt)

    reply_ids = [rid for c in comments for rid in c.get("replies", [])]
    replies = {}
    if reply_ids:
        found = db.comments.find({"_id": {"$in": reply_ids}})
        replies = {r["_id"]: r for r in attach_authors(found)}

    for c in comments:
        c["replies"] = [replies[rid] for rid in c.get("replies", []) if rid in replies]

    return attach_authors(comments), total
