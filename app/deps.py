import math
from fastapi import Query

from app.config import settings
from app.models.schemas import PaginationOut


class Pagination:
    """`?page=&limit=` query parameters shared by every list route."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="1-based page number"),
        limit: int = Query(default=10, ge=1, le=settings.max_page_size, description="Items per page"),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        return PaginationOut(
            page=self.page,
            limit=self.limit,
            total=total,
            pages=math.ceil(total / self.limit),
        ).model_dump()
