"""Static relationship declarations between collections."""

from dataclasses import dataclass
from typing import Dict, List

from programhub.commons.exceptions import ConfigurationError


@dataclass(frozen=True)
class Relationship:
    """A one-level link from documents of one collection to documents of another.

    A forward relationship lives on the child: ``local_field`` holds the parent id
    and ``foreign_field`` is the parent's ``_id`` (``many=False``). A reverse
    relationship lives on the parent and is never persisted: ``local_field`` is the
    parent's ``_id`` and ``foreign_field`` is the child's reference field
    (``many=True``). ``cascade`` marks reverse relationships whose children must be
    removed together with the parent.
    """

    name: str
    target_collection: str
    local_field: str
    foreign_field: str
    many: bool = False
    cascade: bool = False


class RelationshipRegistry:
    """Collection name -> relationship name -> :class:`Relationship`."""

    def __init__(self):
        self._relations: Dict[str, Dict[str, Relationship]] = {}

    def register(self, collection: str, relationship: Relationship) -> Relationship:
        """Declare ``relationship`` on ``collection``."""
        relations = self._relations.setdefault(collection, {})
        if relationship.name in relations:
            raise ConfigurationError(f"Relationship '{relationship.name}' already declared on '{collection}'")
        relations[relationship.name] = relationship
        return relationship

    def get(self, collection: str, name: str) -> Relationship:
        """Look a relationship up, failing with ``ConfigurationError`` when it is not declared."""
        try:
            return self._relations[collection][name]
        except KeyError:
            raise ConfigurationError(f"No relationship '{name}' declared on collection '{collection}'") from None

    def cascading(self, collection: str) -> List[Relationship]:
        """Reverse relationships of ``collection`` whose children are deleted with the parent."""
        return [rel for rel in self._relations.get(collection, {}).values() if rel.many and rel.cascade]
