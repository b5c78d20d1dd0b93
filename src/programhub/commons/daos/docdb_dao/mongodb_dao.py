"""MongoDB DAO module."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, GEOSPHERE, MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.exceptions import StoreError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.commons.vocabulary import Collections


class MongoDBDAO(DocumentDBDAO):
    """DocumentDBDAO backed by a single pooled ``MongoClient``.

    The client is thread safe and shared by every in-flight request.
    """

    def __init__(self, uri: str, db_name: str, client: MongoClient = None, **client_kwargs):
        self.logger = ProgramHubLogger()
        self._client = client if client is not None else MongoClient(uri, **client_kwargs)
        self._db = self._client[db_name]

    def _store_error(self, action: str, collection: str, exc: Exception) -> StoreError:
        self.logger.exception(exc)
        return StoreError(f"Could not {action} on '{collection}': {exc}")

    def count(self, collection: str, filter: Dict) -> int:
        """Count documents matching ``filter``."""
        try:
            return self._db[collection].count_documents(filter)
        except PyMongoError as exc:
            raise self._store_error("count documents", collection, exc) from exc

    def find(
        self,
        collection: str,
        filter: Dict,
        projection: Optional[Sequence[str]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict]:
        """Run a windowed, sorted, projected find and materialize the cursor."""
        try:
            cursor = self._db[collection].find(filter, projection=list(projection) if projection else None)
            if sort:
                cursor = cursor.sort(list(sort))
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return list(cursor)
        except PyMongoError as exc:
            raise self._store_error("query documents", collection, exc) from exc

    def find_one(self, collection: str, filter: Dict, projection: Optional[Sequence[str]] = None) -> Optional[Dict]:
        """Return the first document matching ``filter`` or ``None``."""
        try:
            return self._db[collection].find_one(filter, projection=list(projection) if projection else None)
        except PyMongoError as exc:
            raise self._store_error("query document", collection, exc) from exc

    def insert_one(self, collection: str, doc: Dict) -> Any:
        """Insert ``doc`` and return its ``_id``."""
        try:
            return self._db[collection].insert_one(doc).inserted_id
        except PyMongoError as exc:
            raise self._store_error("insert document", collection, exc) from exc

    def update_one(self, collection: str, filter: Dict, fields: Dict) -> Optional[Dict]:
        """``$set`` ``fields`` on the first match and return the document after the update."""
        try:
            return self._db[collection].find_one_and_update(
                filter, {"$set": fields}, return_document=ReturnDocument.AFTER
            )
        except PyMongoError as exc:
            raise self._store_error("update document", collection, exc) from exc

    def delete_one(self, collection: str, filter: Dict) -> int:
        """Delete the first match."""
        try:
            return self._db[collection].delete_one(filter).deleted_count
        except PyMongoError as exc:
            raise self._store_error("delete document", collection, exc) from exc

    def delete_many(self, collection: str, filter: Dict) -> int:
        """Delete every match."""
        try:
            return self._db[collection].delete_many(filter).deleted_count
        except PyMongoError as exc:
            raise self._store_error("delete documents", collection, exc) from exc

    def liveness_test(self) -> bool:
        """Ping the server."""
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as exc:
            self.logger.error(f"MongoDB is not answering: {exc}")
            return False

    def create_indices(self):
        """Create the unique, geo and foreign-key indices."""
        try:
            programs = self._db[Collections.PROGRAMS]
            programs.create_index([("name", ASCENDING)], unique=True)
            programs.create_index([("location", GEOSPHERE)])
            programs.create_index([("createdAt", ASCENDING)])
            self._db[Collections.COURSES].create_index([("program", ASCENDING)])
            self._db[Collections.REVIEWS].create_index([("program", ASCENDING)])
        except PyMongoError as exc:
            raise self._store_error("create indices", Collections.PROGRAMS, exc) from exc
        self.logger.debug("MongoDB indices are in place.")

    def close(self):
        """Close the client and its connection pool."""
        self._client.close()
