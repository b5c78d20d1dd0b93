"""Per-resource binding of the list-query pipeline.

Each list endpoint declares one :class:`AdvancedResults` at import time::

    program_results = AdvancedResults(
        Collections.PROGRAMS,
        RELATIONSHIPS,
        population=PopulationSpec.of("courses", "title,weeks,tuition,minimumSkill"),
        field_types=FIELD_TYPES[Collections.PROGRAMS],
    )

and runs it per request with the request's query parameters.
"""

from __future__ import annotations

from typing import Any, Mapping

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.relationships import RelationshipRegistry
from programhub.query.compiler import FilterPredicate, compile_query
from programhub.query.executor import QueryExecutor, ResultEnvelope
from programhub.query.operators import ComparisonOperator
from programhub.query.pagination import PageRequest, PaginationSettings
from programhub.query.parser import FieldTypes, QueryRequest, parse_query_params
from programhub.query.population import PopulationSpec, Populator


class AdvancedResults:
    """Parser, compiler, pagination, population and execution for one collection."""

    def __init__(
        self,
        collection: str,
        relationships: RelationshipRegistry,
        population: PopulationSpec | None = None,
        field_types: FieldTypes | None = None,
        default_sort_field: str = "createdAt",
    ):
        self.collection = collection
        self.field_types = dict(field_types or {})
        self.default_sort_field = default_sort_field
        self.populator = None if population is None else Populator(collection, population, relationships)

    def run(
        self,
        dao: DocumentDBDAO,
        params: QueryRequest,
        pagination: PaginationSettings,
        scope: Mapping[str, Any] | None = None,
    ) -> ResultEnvelope:
        """Answer one list request.

        ``scope`` adds fixed equality predicates ahead of the client's filters,
        e.g. ``{"program": program_id}`` for nested ``/programs/{id}/courses``.
        """
        parsed = parse_query_params(params, self.field_types)
        compiled = compile_query(parsed, self.default_sort_field)
        predicates = [FilterPredicate(k, ComparisonOperator.EQ, v) for k, v in (scope or {}).items()]
        predicates.extend(p for p in compiled.predicates if p.field not in (scope or {}))
        executor = QueryExecutor(dao, self.collection, pagination)
        return executor.execute(
            predicates,
            compiled.sort,
            compiled.projection,
            PageRequest(parsed.page, parsed.limit),
            self.populator,
        )
