"""Shared request/response schemas."""

from .base import BaseSchema
from .responses import ApiResponse, MessageResponse, PageMeta, PaginatedResponse

__all__ = ["BaseSchema", "ApiResponse", "MessageResponse", "PageMeta", "PaginatedResponse"]
