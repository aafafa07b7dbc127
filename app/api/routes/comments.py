# app/api/routes/comments.py
from fastapi import APIRouter, Body, Depends, HTTPException
import logging
from pymongo import ReturnDocument

from app.auth.userctx import current_user
from app.db.mongo import db
from app.deps import Pagination
from app.models.schemas import CommentIn, CommentUpdate, LikeOut
from app.services.comment_tree import create_comment, delete_comment, list_top_level
from app.services.counters import toggle_like
from app.services.populate import attach_authors
from app.utils.ids import now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


def _get_owned(comment_id: str, user_id: str) -> dict:
    comment = db.comments.find_one({"_id": comment_id})
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment["author"] != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return comment


# ---------- CREATE COMMENT / REPLY ----------
@router.post("", status_code=201)
def post_comment(body: CommentIn = Body(...), u=Depends(current_user)):
    """
    Comment on a project, or reply to a top-level comment when `parentCommentId` is set.

    Raises:
        400: parent is a reply or belongs to another project
        404: project or parent comment doesn't exist
    """
    doc = create_comment(
        content=body.content,
        author_id=u["_id"],
        project_id=body.projectId,
        parent_id=body.parentCommentId,
    )
    return attach_authors([doc])[0]


# ---------- LIST TOP-LEVEL COMMENTS FOR A PROJECT ----------
@router.get("/project/{project_id}", status_code=200)
def list_project_comments(project_id: str, pagination: Pagination = Depends()):
    comments, total = list_top_level(project_id, pagination)
    return {"comments": comments, "pagination": pagination.meta(total)}


# ---------- EDIT COMMENT ----------
@router.put("/{comment_id}", status_code=200)
def edit_comment(comment_id: str, body: CommentUpdate = Body(...), u=Depends(current_user)):
    _get_owned(comment_id, u["_id"])
    comment = db.comments.find_one_and_update(
        {"_id": comment_id},
        {"$set": {"content": body.content, "updated_at": now_iso()}},
        return_document=ReturnDocument.AFTER,
    )
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return attach_authors([comment])[0]


# ---------- DELETE COMMENT (cascade to replies) ----------
@router.delete("/{comment_id}", status_code=200)
def remove_comment(comment_id: str, u=Depends(current_user)):
    comment = _get_owned(comment_id, u["_id"])
    delete_comment(comment)
    return {"message": "Comment deleted successfully"}


# ---------- LIKE / UNLIKE ----------
@router.post("/{comment_id}/like", status_code=200, response_model=LikeOut)
def like_comment(comment_id: str, u=Depends(current_user)):
    return toggle_like(db.comments, comment_id, u["_id"], not_found="Comment not found")
