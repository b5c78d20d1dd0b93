"""Shared fixtures: an in-memory document store and a fake geocoder."""

from __future__ import annotations

import copy
import math
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from programhub.commons.daos.docdb_dao.docdb_dao_base import DocumentDBDAO
from programhub.commons.exceptions import GeocodingNoMatchError, GeocodingUnavailableError, StoreError
from programhub.commons.vocabulary import Collections
from programhub.geo.geocoder import GeocodedLocation

_MISSING = object()


def _get_path(doc, path):
    value = doc
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _angular_distance(p1, p2):
    lng1, lat1, lng2, lat2 = map(math.radians, (p1[0], p1[1], p2[0], p2[1]))
    a = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(a)))


def _compare(op, actual, expected):
    if op == "$geoWithin":
        center, radius = expected["$centerSphere"]
        coordinates = actual.get("coordinates") if isinstance(actual, dict) else None
        return coordinates is not None and _angular_distance(center, coordinates) <= radius
    if actual is _MISSING:
        return op == "$eq" and expected is None
    candidates = list(actual) + [actual] if isinstance(actual, list) else [actual]
    for candidate in candidates:
        try:
            if op == "$eq" and candidate == expected:
                return True
            if op == "$in" and candidate in expected:
                return True
            if op == "$gt" and candidate > expected:
                return True
            if op == "$gte" and candidate >= expected:
                return True
            if op == "$lt" and candidate < expected:
                return True
            if op == "$lte" and candidate <= expected:
                return True
        except TypeError:
            continue
    if op in ("$eq", "$in", "$gt", "$gte", "$lt", "$lte"):
        return False
    raise NotImplementedError(op)


def _matches(doc, filter):
    for field, condition in (filter or {}).items():
        actual = _get_path(doc, field)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            if not all(_compare(op, actual, expected) for op, expected in condition.items()):
                return False
        elif not _compare("$eq", actual, condition):
            return False
    return True


def _project(doc, projection):
    if not projection:
        return copy.deepcopy(doc)
    projected = {"_id": doc["_id"]}
    for path in projection:
        value = _get_path(doc, path)
        if value is _MISSING:
            continue
        target = projected
        parts = path.split(".")
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = copy.deepcopy(value)
    return projected


def _sort_key(field):
    def key(doc):
        value = _get_path(doc, field)
        if value is _MISSING or value is None:
            return (0, 0)
        return (1, value)

    return key


class InMemoryDAO(DocumentDBDAO):
    """DocumentDBDAO over plain dicts, covering the MongoDB subset the application uses."""

    def __init__(self, unique=None):
        self.collections = {}
        self.unique = unique or {}
        self.calls = []
        self.failures = {}
        self.alive = True

    def fail_on(self, operation, collection, exc=None):
        """Make the next calls of ``operation`` on ``collection`` raise."""
        self.failures[(operation, collection)] = exc or StoreError(f"{operation} on {collection} failed")

    def _call(self, operation, collection):
        self.calls.append((operation, collection))
        if (operation, collection) in self.failures:
            raise self.failures[(operation, collection)]
        return self.collections.setdefault(collection, [])

    def count(self, collection, filter):
        return sum(1 for doc in self._call("count", collection) if _matches(doc, filter))

    def find(self, collection, filter, projection=None, sort=None, skip=0, limit=0):
        docs = [doc for doc in self._call("find", collection) if _matches(doc, filter)]
        for field, direction in reversed(list(sort or [])):
            docs.sort(key=_sort_key(field), reverse=direction == -1)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return [_project(doc, projection) for doc in docs]

    def find_one(self, collection, filter, projection=None):
        for doc in self._call("find_one", collection):
            if _matches(doc, filter):
                return _project(doc, projection)
        return None

    def insert_one(self, collection, doc):
        docs = self._call("insert_one", collection)
        unique_field = self.unique.get(collection)
        if unique_field and any(d.get(unique_field) == doc.get(unique_field) for d in docs):
            raise StoreError(f"Duplicate {unique_field} '{doc.get(unique_field)}' in '{collection}'")
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        docs.append(stored)
        return stored["_id"]

    def update_one(self, collection, filter, fields):
        for doc in self._call("update_one", collection):
            if _matches(doc, filter):
                doc.update(copy.deepcopy(fields))
                return copy.deepcopy(doc)
        return None

    def delete_one(self, collection, filter):
        docs = self._call("delete_one", collection)
        for index, doc in enumerate(docs):
            if _matches(doc, filter):
                del docs[index]
                return 1
        return 0

    def delete_many(self, collection, filter):
        docs = self._call("delete_many", collection)
        kept = [doc for doc in docs if not _matches(doc, filter)]
        deleted = len(docs) - len(kept)
        docs[:] = kept
        return deleted

    def liveness_test(self):
        return self.alive


class FakeGeocoder:
    """Geocoder answering from a fixed address book."""

    def __init__(self, locations=None, unavailable=False):
        self.locations = dict(locations or {})
        self.unavailable = unavailable
        self.lookups = []

    def geocode(self, address):
        self.lookups.append(address)
        if self.unavailable:
            raise GeocodingUnavailableError("Geocoding service unavailable: connection refused")
        if address not in self.locations:
            raise GeocodingNoMatchError(address)
        return self.locations[address]


BOSTON = GeocodedLocation(-71.0700, 42.3400, "Boston, MA 02118, US", None, "Boston", "MA", "02118", "US")
PROVIDENCE = GeocodedLocation(-71.4128, 41.8240, "Providence, RI 02903, US", None, "Providence", "RI", "02903", "US")
LOS_ANGELES = GeocodedLocation(
    -118.2437, 34.0522, "Los Angeles, CA 90012, US", None, "Los Angeles", "CA", "90012", "US"
)

ADDRESS_BOOK = {
    "02118": BOSTON,
    "233 Bay State Rd Boston MA 02215": BOSTON,
    "1 Financial Plaza Providence RI 02903": PROVIDENCE,
    "200 N Spring St Los Angeles CA 90012": LOS_ANGELES,
}

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_program(name, location, created_offset, **fields):
    doc = {
        "_id": ObjectId(),
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "description": f"{name} description",
        "careers": ["Web Development"],
        "location": location.to_location_doc(),
        "housing": False,
        "averageCost": None,
        "createdAt": BASE_TIME + timedelta(days=created_offset),
    }
    doc.update(fields)
    return doc


@pytest.fixture
def dao():
    return InMemoryDAO(unique={Collections.PROGRAMS: "name"})


@pytest.fixture
def geocoder():
    return FakeGeocoder(ADDRESS_BOOK)


@pytest.fixture
def seeded_dao(dao):
    """Three programs (Boston, Providence, Los Angeles) with courses and reviews."""
    programs = [
        make_program("Devworks Bootcamp", BOSTON, 0, averageCost=10000.0, housing=True),
        make_program("ModernTech Bootcamp", PROVIDENCE, 1, averageCost=8000.0, careers=["UI/UX", "Business"]),
        make_program("Codemasters", LOS_ANGELES, 2, averageCost=12000.0, careers=["Data Science"]),
    ]
    for program in programs:
        dao.insert_one(Collections.PROGRAMS, program)

    courses = [
        ("Front End Web Development", 8, 8000.0, programs[0]),
        ("Full Stack Web Development", 12, 10000.0, programs[0]),
        ("UI/UX", 12, 10000.0, programs[1]),
        ("Data Science Program", 10, 12000.0, programs[2]),
    ]
    for offset, (title, weeks, tuition, program) in enumerate(courses):
        dao.insert_one(
            Collections.COURSES,
            {
                "title": title,
                "description": f"{title} description",
                "weeks": weeks,
                "tuition": tuition,
                "minimumSkill": "beginner",
                "scholarshipAvailable": False,
                "program": program["_id"],
                "createdAt": BASE_TIME + timedelta(days=offset),
            },
        )

    for rating, program in ((8, programs[0]), (9, programs[0]), (6, programs[1])):
        dao.insert_one(
            Collections.REVIEWS,
            {
                "title": "Review",
                "text": "Good program",
                "rating": rating,
                "program": program["_id"],
                "createdAt": BASE_TIME,
            },
        )

    dao.programs = programs
    dao.calls.clear()
    return dao
