"""
Standard Response Schemas

Success envelopes used across the API.
"""

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel

from .base import BaseSchema

T = TypeVar("T")


class PageMeta(BaseSchema):
    """Pagination metadata."""
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> "PageMeta":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response format."""
    success: bool = True
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    """Response with pagination metadata."""
    success: bool = True
    data: List[T]
    meta: PageMeta


class MessageResponse(BaseSchema):
    message: str

