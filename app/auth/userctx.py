# app/auth/userctx.py
import logging
from fastapi import Depends, HTTPException, status
from app.auth.jwt import bearer, decode_token
from app.db.mongo import db

logger = logging.getLogger(__name__)

async def current_user(auth=Depends(bearer)):
    """
    Resolve the caller from `Authorization: Bearer <jwt>`.

    Returns the stored user document without its password hash.
    Raises 401 when the header is missing, the token is invalid,
    or the subject no longer exists.
    """
    if auth is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = decode_token(auth)
    sub = claims.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = db.users.find_one({"_id": sub}, {"password": 0})
    if not user:
        logger.warning(f"Token subject {sub} has no user record")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user
