"""DB API module: resource operations on top of the document DAO."""

from typing import Any, Dict, List, Mapping

from slugify import slugify

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.exceptions import NotFoundError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.commons.utils import to_object_id, utc_now
from programhub.commons.vocabulary import RELATIONSHIPS, Collections
from programhub.geo.radius import GeospatialResolver
from programhub.lifecycle.cascade import CascadeResult, RelationshipLifecycleManager
from programhub.query.advanced_results import AdvancedResults
from programhub.query.executor import ResultEnvelope
from programhub.query.pagination import PaginationSettings
from programhub.query.parser import QueryRequest
from programhub.query.population import Populator


class DBAPI(object):
    """DB API class.

    One instance is built per application and shared by every request; it holds
    no per-request state.
    """

    def __init__(
        self,
        dao: DocumentDBDAO,
        pagination: PaginationSettings,
        geocoder,
        distance_unit: str = "km",
    ):
        self.logger = ProgramHubLogger()
        self._dao = dao
        self.pagination = pagination
        self.geocoder = geocoder
        self.geo_resolver = GeospatialResolver(geocoder, distance_unit)
        self.programs_lifecycle = RelationshipLifecycleManager(
            dao, Collections.PROGRAMS, RELATIONSHIPS, resource="Program"
        )

    @property
    def dao(self) -> DocumentDBDAO:
        """The underlying document DAO."""
        return self._dao

    def close(self):
        """Close DB resources."""
        self._dao.close()

    def liveness_test(self) -> bool:
        """Return ``True`` when the store answers."""
        return self._dao.liveness_test()

    def create_indices(self):
        """Create the store indices."""
        self._dao.create_indices()

    def advanced_results(
        self,
        results: AdvancedResults,
        params: QueryRequest,
        scope: Mapping[str, Any] = None,
    ) -> ResultEnvelope:
        """Run a resource's list pipeline for one request.

        Parameters
        ----------
        results : AdvancedResults
            The resource binding declared by the route module.
        params : mapping
            Raw query parameters.
        scope : mapping, optional
            Fixed equality filters (e.g. the parent id of a nested route).

        Returns
        -------
        ResultEnvelope
            The paged envelope.
        """
        return results.run(self._dao, params, self.pagination, scope=scope)

    def _get_by_id(self, collection: str, resource: str, doc_id, populator: Populator = None) -> Dict:
        oid = to_object_id(resource, doc_id)
        doc = self._dao.find_one(collection, {"_id": oid})
        if doc is None:
            raise NotFoundError(resource, doc_id)
        if populator is not None:
            populator.populate(self._dao, [doc])
        return doc

    def _update_by_id(self, collection: str, resource: str, doc_id, fields: Dict) -> Dict:
        oid = to_object_id(resource, doc_id)
        fields = {k: v for k, v in fields.items() if k != "_id"}
        if not fields:
            return self._get_by_id(collection, resource, oid)
        doc = self._dao.update_one(collection, {"_id": oid}, fields)
        if doc is None:
            raise NotFoundError(resource, doc_id)
        return doc

    def _delete_by_id(self, collection: str, resource: str, doc_id):
        oid = to_object_id(resource, doc_id)
        if self._dao.delete_one(collection, {"_id": oid}) == 0:
            raise NotFoundError(resource, doc_id)

    def _require_program(self, program_id):
        oid = to_object_id("Program", program_id)
        if self._dao.find_one(Collections.PROGRAMS, {"_id": oid}, projection=["_id"]) is None:
            raise NotFoundError("Program", program_id)
        return oid

    # Programs

    def get_program(self, program_id, populator: Populator = None) -> Dict:
        """Get a program by id, optionally populating one relationship."""
        return self._get_by_id(Collections.PROGRAMS, "Program", program_id, populator)

    def create_program(self, data: Dict) -> Dict:
        """Create a program.

        The ``address`` is geocoded into a GeoJSON ``location`` and then dropped,
        ``slug`` is derived from ``name`` and ``createdAt`` is set.
        """
        doc = dict(data)
        address = doc.pop("address")
        doc["location"] = self.geocoder.geocode(address).to_location_doc()
        doc["slug"] = slugify(doc["name"])
        doc["createdAt"] = utc_now()
        doc["_id"] = self._dao.insert_one(Collections.PROGRAMS, doc)
        self.logger.debug(f"Created program {doc['_id']} ({doc['name']})")
        return doc

    def update_program(self, program_id, fields: Dict) -> Dict:
        """Update a program, re-geocoding a new address and re-slugging a new name."""
        fields = dict(fields)
        if "address" in fields:
            fields["location"] = self.geocoder.geocode(fields.pop("address")).to_location_doc()
        if "name" in fields:
            fields["slug"] = slugify(fields["name"])
        return self._update_by_id(Collections.PROGRAMS, "Program", program_id, fields)

    def delete_program(self, program_id) -> CascadeResult:
        """Delete a program together with its courses and reviews."""
        oid = to_object_id("Program", program_id)
        result = self.programs_lifecycle.delete_parent(oid)
        self.logger.debug(f"Deleted program {oid} and {result.total_children_deleted} children")
        return result

    def programs_in_radius(self, zipcode: str, distance) -> List[Dict]:
        """All programs located within ``distance`` of the geocoded ``zipcode``. Unbounded."""
        radius_query = self.geo_resolver.resolve_radius(zipcode, distance)
        return self._dao.find(Collections.PROGRAMS, radius_query.to_filter("location"))

    def program_children(self, results: AdvancedResults, program_id, params: QueryRequest) -> ResultEnvelope:
        """Paged list of one child collection scoped to an existing program."""
        oid = self._require_program(program_id)
        return self.advanced_results(results, params, scope={"program": oid})

    # Courses

    def get_course(self, course_id, populator: Populator = None) -> Dict:
        """Get a course by id."""
        return self._get_by_id(Collections.COURSES, "Course", course_id, populator)

    def add_course(self, program_id, data: Dict) -> Dict:
        """Add a course to an existing program."""
        doc = dict(data)
        doc["program"] = self._require_program(program_id)
        doc["createdAt"] = utc_now()
        doc["_id"] = self._dao.insert_one(Collections.COURSES, doc)
        return doc

    def update_course(self, course_id, fields: Dict) -> Dict:
        """Update a course. Its program cannot be changed."""
        fields = {k: v for k, v in fields.items() if k != "program"}
        return self._update_by_id(Collections.COURSES, "Course", course_id, fields)

    def delete_course(self, course_id):
        """Delete a course."""
        self._delete_by_id(Collections.COURSES, "Course", course_id)

    # Reviews

    def get_review(self, review_id, populator: Populator = None) -> Dict:
        """Get a review by id."""
        return self._get_by_id(Collections.REVIEWS, "Review", review_id, populator)

    def add_review(self, program_id, data: Dict) -> Dict:
        """Add a review to an existing program."""
        doc = dict(data)
        doc["program"] = self._require_program(program_id)
        doc["createdAt"] = utc_now()
        doc["_id"] = self._dao.insert_one(Collections.REVIEWS, doc)
        return doc

    def delete_review(self, review_id):
        """Delete a review."""
        self._delete_by_id(Collections.REVIEWS, "Review", review_id)
