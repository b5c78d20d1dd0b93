"""Document database DAO base module."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple


class DocumentDBDAO(ABC):
    """Abstract document store used by the query engine, the geo search and the cascade manager.

    Filters, projections and sort specs use MongoDB syntax: filters are
    ``{field: {"$op": value}}`` documents, projections are lists of included
    field names and sorts are ``[(field, 1 | -1), ...]`` lists. Implementations
    translate their own failures into ``StoreError``.
    """

    @abstractmethod
    def count(self, collection: str, filter: Dict) -> int:
        """Count documents matching ``filter``."""
        raise NotImplementedError()

    @abstractmethod
    def find(
        self,
        collection: str,
        filter: Dict,
        projection: Optional[Sequence[str]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict]:
        """Return matching documents, sorted, windowed and projected. ``limit=0`` means no limit."""
        raise NotImplementedError()

    @abstractmethod
    def find_one(self, collection: str, filter: Dict, projection: Optional[Sequence[str]] = None) -> Optional[Dict]:
        """Return the first document matching ``filter`` or ``None``."""
        raise NotImplementedError()

    @abstractmethod
    def insert_one(self, collection: str, doc: Dict) -> Any:
        """Insert ``doc`` and return its new ``_id``."""
        raise NotImplementedError()

    @abstractmethod
    def update_one(self, collection: str, filter: Dict, fields: Dict) -> Optional[Dict]:
        """Set ``fields`` on the first match and return the updated document, or ``None`` when nothing matched."""
        raise NotImplementedError()

    @abstractmethod
    def delete_one(self, collection: str, filter: Dict) -> int:
        """Delete the first match. Returns the number of deleted documents (0 or 1)."""
        raise NotImplementedError()

    @abstractmethod
    def delete_many(self, collection: str, filter: Dict) -> int:
        """Delete every match. Returns the number of deleted documents."""
        raise NotImplementedError()

    @abstractmethod
    def liveness_test(self) -> bool:
        """Return ``True`` when the store answers."""
        raise NotImplementedError()

    def create_indices(self):
        """Create the indices the application relies on. Optional for backends."""
        pass

    def close(self):
        """Release store resources."""
        pass
