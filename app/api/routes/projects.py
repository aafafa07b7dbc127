# app/api/routes/projects.py
from fastapi import APIRouter, Body, Depends, HTTPException
import logging
from pymongo import ReturnDocument

from app.auth.userctx import current_user
from app.db.mongo import db
from app.deps import Pagination
from app.models.schemas import LikeOut, ProjectIn, ProjectUpdate, split_tags
from app.services.comment_tree import delete_project_comments
from app.services.counters import toggle_like
from app.services.populate import AUTHOR_PROFILE, attach_authors
from app.utils.ids import new_id, now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_owned(project_id: str, user_id: str) -> dict:
    prj = db.projects.find_one({"_id": project_id})
    if not prj:
        raise HTTPException(status_code=404, detail="Project not found")
    if prj["author"] != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return prj


def _page(filt: dict, pagination: Pagination) -> dict:
    cur = (
        db.projects.find(filt)
        .sort("created_at", -1)
        .skip(pagination.skip)
        .limit(pagination.limit)
    )
    projects = attach_authors(cur)
    total = db.projects.count_documents(filt)
    return {"projects": projects, "pagination": pagination.meta(total)}


# ---------- CREATE PROJECT ----------
@router.post("", status_code=201)
def create_project(body: ProjectIn = Body(...), u=Depends(current_user)):
    data = body.model_dump(mode="json")
    now = now_iso()
    doc = {
        "_id": new_id("p"),
        "title": data["title"],
        "description": data["description"],
        "image": data["image"],
        "githubUrl": data["githubUrl"],
        "liveUrl": data.get("liveUrl"),
        "tags": split_tags(data.get("tags")),
        "author": u["_id"],
        "likes": [],
        "likesCount": 0,
        "commentsCount": 0,
        "created_at": now,
        "updated_at": now,
    }
    db.projects.insert_one(doc)
    logger.info(f"Project {doc['_id']} created by {u['_id']}")
    return attach_authors([doc])[0]


# ---------- LIST PROJECTS ----------
@router.get("", status_code=200)
def list_projects(pagination: Pagination = Depends()):
    return _page({}, pagination)


# ---------- LIST A USER'S PROJECTS ----------
@router.get("/user/{user_id}", status_code=200)
def list_user_projects(user_id: str, pagination: Pagination = Depends()):
    return _page({"author": user_id}, pagination)


# ---------- GET SINGLE PROJECT ----------
@router.get("/{project_id}", status_code=200)
def get_project(project_id: str):
    prj = db.projects.find_one({"_id": project_id})
    if not prj:
        raise HTTPException(status_code=404, detail="Project not found")
    return attach_authors([prj], AUTHOR_PROFILE)[0]


# ---------- UPDATE PROJECT ----------
@router.put("/{project_id}", status_code=200)
def update_project(project_id: str, body: ProjectUpdate = Body(...), u=Depends(current_user)):
    """
    Update the writable fields of a project. Author only.

    Raises:
        403: caller is not the author
        404: project doesn't exist
    """
    _get_owned(project_id, u["_id"])

    changes = body.model_dump(mode="json", exclude_unset=True)
    if "tags" in changes:
        changes["tags"] = split_tags(changes["tags"])
    # required fields can't be cleared
    for key in ("title", "description", "image", "githubUrl"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    changes["updated_at"] = now_iso()

    prj = db.projects.find_one_and_update(
        {"_id": project_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not prj:
        raise HTTPException(status_code=404, detail="Project not found")
    return attach_authors([prj])[0]


# ---------- DELETE PROJECT (cascade) ----------
@router.delete("/{project_id}", status_code=200)
def delete_project(project_id: str, u=Depends(current_user)):
    """
    Delete a project and every comment and reply attached to it. Author only.
    """
    _get_owned(project_id, u["_id"])

    comments_deleted = delete_project_comments(project_id)
    db.projects.delete_one({"_id": project_id})

    logger.info(f"Project {project_id} deleted by {u['_id']} ({comments_deleted} comments)")
    return {"message": "Project deleted successfully"}


# ---------- LIKE / UNLIKE ----------
@router.post("/{project_id}/like", status_code=200, response_model=LikeOut)
def like_project(project_id: str, u=Depends(current_user)):
    return toggle_like(db.projects, project_id, u["_id"], not_found="Project not found")
