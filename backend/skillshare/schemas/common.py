import math
from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


def serialize_datetime(dt: datetime | None) -> str | None:
    """Serialize datetime to ISO format with UTC timezone."""
    if dt is None:
        return None
    # Naive values coming back from the database are UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


class MessageResponse(BaseModel):
    message: str


class PageMeta(BaseModel):
    total_items: int
    per_page: int
    current_page: int
    total_pages: int

    @classmethod
    def build(cls, total_items: int, per_page: int, current_page: int) -> "PageMeta":
        return cls(
            total_items=total_items,
            per_page=per_page,
            current_page=current_page,
            total_pages=math.ceil(total_items / per_page) if per_page > 0 else 0,
        )


class Page(BaseModel, Generic[T]):
    """Paginated envelope: {data: [...], meta: {...}}."""
    data: list[T]
    meta: PageMeta
