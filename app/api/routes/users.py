# app/api/routes/users.py
from fastapi import APIRouter, Body, Depends

from app.auth.userctx import current_user
from app.models.schemas import ProfileUpdate
from app.services.users import get_public_profile, search_users, update_profile

router = APIRouter(prefix="/users", tags=["users"])

# ---------- UPDATE OWN PROFILE ----------
@router.put("/profile")
def update_my_profile(body: ProfileUpdate = Body(...), u=Depends(current_user)):
    """
    Update username, bio, avatar, githubProfile or portfolio.
    Only fields present in the body are written.

    Raises:
        409: new username already taken by another account
    """
    changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    return update_profile(u, changes)

# ---------- SEARCH ----------
@router.get("/search/{query}")
def search(query: str):
    return search_users(query)

# ---------- PUBLIC PROFILE ----------
@router.get("/{user_id}")
def get_user(user_id: str):
    return get_public_profile(user_id)
