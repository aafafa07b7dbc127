from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from typing import List, Optional


def split_tags(raw: Optional[str]) -> List[str]:
    """'web, api' -> ['web', 'api']; empty or missing -> []."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


# ---------- Users ----------
class RegisterIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Only the fields a caller sends are written. Password is not accepted here."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    username: Optional[str] = Field(None, min_length=3, max_length=30)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[HttpUrl] = None
    githubProfile: Optional[HttpUrl] = None
    portfolio: Optional[HttpUrl] = None


# ---------- Projects ----------
class ProjectIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    image: HttpUrl
    githubUrl: HttpUrl
    liveUrl: Optional[HttpUrl] = None
    tags: Optional[str] = Field(None, description="Comma-separated, e.g. 'web, api'")


class ProjectUpdate(BaseModel):
    # author, likes and the counters are not writable through this model
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    image: Optional[HttpUrl] = None
    githubUrl: Optional[HttpUrl] = None
    liveUrl: Optional[HttpUrl] = None
    tags: Optional[str] = None


# ---------- Comments ----------
class CommentIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=500)
    projectId: str = Field(..., min_length=1)
    parentCommentId: Optional[str] = None


class CommentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=500)


# ---------- Responses ----------
class LikeOut(BaseModel):
    liked: bool
    likesCount: int


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
