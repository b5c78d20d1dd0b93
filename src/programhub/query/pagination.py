"""Pagination window calculator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class PaginationSettings:
    """Page-size defaults for list endpoints."""

    default_limit: int = 25
    max_limit: int = 100

    def __post_init__(self):
        if self.default_limit < 1 or self.max_limit < 1:
            raise ValueError("Page sizes must be positive.")
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit cannot exceed max_limit.")


@dataclass(frozen=True)
class PageRequest:
    """Raw ``page``/``limit`` values as received, before the total is known."""

    page: str | None = None
    limit: str | None = None


@dataclass(frozen=True)
class PageLink:
    """A neighbouring page reference in the envelope."""

    page: int
    limit: int

    def to_dict(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit}


@dataclass(frozen=True)
class PaginationWindow:
    """The slice of the matching set returned by one list request."""

    page: int
    limit: int
    skip: int
    total: int

    @property
    def next(self) -> PageLink | None:
        if self.skip + self.limit < self.total:
            return PageLink(self.page + 1, self.limit)
        return None

    @property
    def prev(self) -> PageLink | None:
        if self.page > 1:
            return PageLink(self.page - 1, self.limit)
        return None

    def links(self) -> Dict[str, Dict[str, int]]:
        """The envelope's ``pagination`` block: only the links that exist."""
        links = {}
        if self.next is not None:
            links["next"] = self.next.to_dict()
        if self.prev is not None:
            links["prev"] = self.prev.to_dict()
        return links


def _positive_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value >= 1 else None


def compute(
    page_param: str | None,
    limit_param: str | None,
    total_count: int,
    default_limit: int,
    max_limit: int,
) -> PaginationWindow:
    """Compute the window for a request once the total number of matches is known.

    Unparseable or non-positive values fall back to page 1 and ``default_limit``;
    ``limit`` is clamped to ``max_limit``. A page past the end still yields a
    valid window (it just selects nothing).
    """
    page = _positive_int(page_param) or 1
    limit = min(_positive_int(limit_param) or default_limit, max_limit)
    return PaginationWindow(page=page, limit=limit, skip=(page - 1) * limit, total=max(int(total_count), 0))
