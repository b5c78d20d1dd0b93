"""Relationship populator.

Expands one declared relationship on an already-windowed page of documents.
The binding between a resource and its population target is checked once, when
the :class:`Populator` is built, so a typo in a route module fails at import
time instead of on the first request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.relationships import RelationshipRegistry
from programhub.query.compiler import FilterPredicate, ProjectionSpec, compile_projection, predicates_to_native
from programhub.query.operators import ComparisonOperator


@dataclass(frozen=True)
class PopulationSpec:
    """Which relationship to expand and which fields of the related documents to keep."""

    relation_field: str
    projection: ProjectionSpec = field(default_factory=ProjectionSpec)

    @classmethod
    def of(cls, relation_field: str, select: str | None = None) -> "PopulationSpec":
        """Build a spec from a comma-separated field list, e.g. ``PopulationSpec.of("program", "name,description")``."""
        return cls(relation_field, compile_projection(select))


class Populator:
    """A PopulationSpec bound to a declared relationship of ``collection``."""

    def __init__(self, collection: str, spec: PopulationSpec, relationships: RelationshipRegistry):
        self.collection = collection
        self.spec = spec
        # Raises ConfigurationError for undeclared relationships.
        self.relationship = relationships.get(collection, spec.relation_field)

    def populate(self, dao: DocumentDBDAO, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Attach related documents to ``docs`` in place using a single lookup, and return ``docs``."""
        rel = self.relationship
        keys = []
        for doc in docs:
            key = doc.get(rel.local_field)
            if key is not None and key not in keys:
                keys.append(key)
        if not keys:
            return docs

        lookup = predicates_to_native([FilterPredicate(rel.foreign_field, ComparisonOperator.IN, keys)])
        projection = self.spec.projection.with_field(rel.foreign_field)
        related = dao.find(rel.target_collection, lookup, projection=projection.to_native())

        if rel.many:
            grouped: Dict[Any, List[Dict[str, Any]]] = {}
            for item in related:
                grouped.setdefault(item.get(rel.foreign_field), []).append(item)
            for doc in docs:
                if rel.local_field in doc:
                    doc[rel.name] = grouped.get(doc[rel.local_field], [])
        else:
            by_key = {item.get(rel.foreign_field): item for item in related}
            for doc in docs:
                if rel.local_field in doc:
                    doc[rel.name] = by_key.get(doc[rel.local_field])
        return docs
