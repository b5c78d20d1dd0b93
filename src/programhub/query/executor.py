"""Query executor and envelope builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.query.compiler import (
    FilterPredicate,
    ProjectionSpec,
    SortKey,
    predicates_to_native,
    sort_to_native,
)
from programhub.query.pagination import PageRequest, PaginationSettings, PaginationWindow, compute
from programhub.query.population import Populator


@dataclass
class ResultEnvelope:
    """Uniform list response: ``{success, count, pagination, data}``."""

    data: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Dict[str, Dict[str, int]] | None = None
    success: bool = True

    @property
    def count(self) -> int:
        """Number of documents in this page."""
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"success": self.success, "count": self.count}
        if self.pagination is not None:
            envelope["pagination"] = self.pagination
        envelope["data"] = self.data
        return envelope


class QueryExecutor:
    """Runs a compiled query against one collection.

    Count and fetch are two independent round-trips. Under concurrent writes the
    reported pagination may disagree slightly with the fetched page; no
    transaction is used to prevent it.
    """

    def __init__(self, dao: DocumentDBDAO, collection: str, pagination: PaginationSettings):
        self.dao = dao
        self.collection = collection
        self.pagination = pagination

    def execute(
        self,
        predicates: Sequence[FilterPredicate],
        sort: Sequence[SortKey],
        projection: ProjectionSpec,
        page_request: PageRequest,
        populator: Populator | None = None,
    ) -> ResultEnvelope:
        """Count, window, fetch and populate.

        Parameters
        ----------
        predicates : sequence of FilterPredicate
            Conjunction applied to both the count and the fetch.
        sort : sequence of SortKey
            Ordering of the fetch.
        projection : ProjectionSpec
            Fields kept on each fetched document.
        page_request : PageRequest
            Raw page/limit values; resolved once the total is known.
        populator : Populator, optional
            Relationship expansion applied to the fetched page only.

        Returns
        -------
        ResultEnvelope
            Envelope with pagination links.
        """
        native_filter = predicates_to_native(predicates)
        total = self.dao.count(self.collection, native_filter)
        window = compute(
            page_request.page,
            page_request.limit,
            total,
            self.pagination.default_limit,
            self.pagination.max_limit,
        )
        docs = self._fetch(native_filter, sort, projection, window)
        if populator is not None:
            docs = populator.populate(self.dao, docs)
        return ResultEnvelope(data=docs, pagination=window.links())

    def _fetch(
        self,
        native_filter: Dict[str, Any],
        sort: Sequence[SortKey],
        projection: ProjectionSpec,
        window: PaginationWindow,
    ) -> List[Dict[str, Any]]:
        if window.skip >= window.total:
            return []
        return self.dao.find(
            self.collection,
            native_filter,
            projection=projection.to_native(),
            sort=sort_to_native(sort),
            skip=window.skip,
            limit=window.limit,
        )
