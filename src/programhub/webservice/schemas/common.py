"""Shared request/response schemas for webservice endpoints."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PageLink(BaseModel):
    """Neighbouring page reference."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)


class ListResponse(BaseModel):
    """Paged envelope for list endpoints. ``pagination`` only holds the links that exist."""

    success: bool = True
    count: int
    pagination: Dict[str, PageLink] = Field(default_factory=dict)
    data: List[Dict[str, Any]]


class CollectionResponse(BaseModel):
    """Unpaged envelope (radius search, children of a program)."""

    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class DataResponse(BaseModel):
    """Single-document envelope."""

    success: bool = True
    data: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: bool = False
    error: str


# Error statuses documented on every resource router.
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid query, body or address"},
    404: {"model": ErrorResponse, "description": "Unknown id"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}
