# app/auth/routes.py
from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.auth.jwt import mint_token
from app.auth.userctx import current_user
from app.models.schemas import LoginIn, RegisterIn
from app.services.users import authenticate, create_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(body: RegisterIn = Body(...)):
    """
    Create an account and return a bearer token for it.

    Raises:
        409: username or email already in use
    """
    user = create_user(body.username, body.email, body.password)
    return {"user": user, "access_token": mint_token(user["_id"]), "token_type": "bearer"}


@router.post("/login", status_code=200)
def login(body: LoginIn = Body(...)):
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    return {"user": user, "access_token": mint_token(user["_id"]), "token_type": "bearer"}


@router.get("/me")
def me(u=Depends(current_user)):
    return u
