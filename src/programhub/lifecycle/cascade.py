"""Relationship lifecycle manager.

Programs own courses and reviews by reference: each child stores its parent's
``_id`` and the parent stores nothing. The children of a parent are therefore
always found by a fresh reverse lookup, and deleting a parent is orchestrated
here as two observable steps: first the children, then the parent. The two steps
are independent store operations; a failure in either one raises
``CascadeIntegrityError`` describing what was already removed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.exceptions import CascadeIntegrityError, NotFoundError, StoreError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.commons.relationships import RelationshipRegistry


@dataclass
class CascadeResult:
    """Outcome of a completed cascade delete."""

    parent_id: Any
    children_deleted: Dict[str, int] = field(default_factory=dict)

    @property
    def total_children_deleted(self) -> int:
        return sum(self.children_deleted.values())

    def describe_removed(self) -> str:
        """Already-removed children per collection, e.g. ``"2 courses and 1 reviews"``."""
        parts = [f"{count} {collection}" for collection, count in self.children_deleted.items() if count]
        return " and ".join(parts)


class RelationshipLifecycleManager:
    """Reverse lookups and cascade deletion for one parent collection."""

    def __init__(
        self,
        dao: DocumentDBDAO,
        parent_collection: str,
        relationships: RelationshipRegistry,
        resource: str = "Resource",
    ):
        self.logger = ProgramHubLogger()
        self.dao = dao
        self.parent_collection = parent_collection
        self.relationships = relationships
        self.resource = resource

    def children_of(self, parent_id, relation_name: str, projection: Sequence[str] | None = None) -> List[Dict]:
        """Children of ``parent_id`` through the reverse relationship ``relation_name``, read fresh."""
        rel = self.relationships.get(self.parent_collection, relation_name)
        return self.dao.find(rel.target_collection, {rel.foreign_field: parent_id}, projection=projection)

    def delete_parent(self, parent_id) -> CascadeResult:
        """Delete every cascading child of ``parent_id`` and then the parent itself.

        Raises
        ------
        NotFoundError
            If the parent does not exist. Nothing is deleted.
        CascadeIntegrityError
            If deleting children fails (the parent is left in place) or if deleting
            the parent fails after its children were removed.
        """
        parent = self.dao.find_one(self.parent_collection, {"_id": parent_id}, projection=["_id"])
        if parent is None:
            raise NotFoundError(self.resource, parent_id)

        result = CascadeResult(parent_id=parent_id)
        for rel in self.relationships.cascading(self.parent_collection):
            try:
                deleted = self.dao.delete_many(rel.target_collection, {rel.foreign_field: parent_id})
            except StoreError as exc:
                self.logger.error(
                    f"Cascade delete of {self.parent_collection} {parent_id} aborted while removing "
                    f"{rel.target_collection}; {result.total_children_deleted} children already removed, "
                    f"parent left in place."
                )
                removed = result.describe_removed()
                already = f"{removed} were already removed, " if removed else ""
                raise CascadeIntegrityError(
                    f"Could not delete {rel.target_collection} of {self.resource.lower()} '{parent_id}'; "
                    f"{already}the {self.resource.lower()} was not deleted",
                    parent_id=parent_id,
                    children_deleted=result.total_children_deleted,
                ) from exc
            result.children_deleted[rel.target_collection] = deleted
            self.logger.debug(f"Removed {deleted} {rel.target_collection} of {self.parent_collection} {parent_id}")

        try:
            removed = self.dao.delete_one(self.parent_collection, {"_id": parent_id})
        except StoreError as exc:
            removed = 0
            cause = exc
        else:
            cause = None
        if removed != 1:
            self.logger.error(
                f"Children of {self.parent_collection} {parent_id} were removed "
                f"({result.total_children_deleted}) but the parent could not be deleted."
            )
            raise CascadeIntegrityError(
                f"Removed {result.total_children_deleted} children of {self.resource.lower()} '{parent_id}' "
                f"but could not delete the {self.resource.lower()} itself",
                parent_id=parent_id,
                children_deleted=result.total_children_deleted,
            ) from cause
        return result
