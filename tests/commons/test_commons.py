"""Registry, id conversion, logger and response normalization tests."""

import logging
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from programhub import configs
from programhub.commons.exceptions import ConfigurationError, NotFoundError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.commons.relationships import Relationship, RelationshipRegistry
from programhub.commons.utils import to_object_id
from programhub.commons.vocabulary import RELATIONSHIPS, Collections, parse_bool
from programhub.query.executor import ResultEnvelope
from programhub.webservice.services.serializers import normalize_doc, normalize_envelope


def test_registry_rejects_duplicates_and_unknown_names():
    registry = RelationshipRegistry()
    registry.register("parents", Relationship("kids", "kids", "_id", "parent", many=True, cascade=True))
    with pytest.raises(ConfigurationError):
        registry.register("parents", Relationship("kids", "kids", "_id", "parent"))
    with pytest.raises(ConfigurationError):
        registry.get("parents", "pets")
    assert [rel.name for rel in registry.cascading("parents")] == ["kids"]


def test_programs_cascade_to_courses_and_reviews():
    assert [rel.target_collection for rel in RELATIONSHIPS.cascading(Collections.PROGRAMS)] == [
        Collections.COURSES,
        Collections.REVIEWS,
    ]
    assert RELATIONSHIPS.cascading(Collections.COURSES) == []


def test_to_object_id():
    oid = ObjectId()
    assert to_object_id("Program", str(oid)) == oid
    assert to_object_id("Program", oid) is oid
    with pytest.raises(NotFoundError, match="Program not found with id 'abc'"):
        to_object_id("Program", "abc")


def test_parse_bool():
    assert parse_bool(" TRUE ") is True
    assert parse_bool("0") is False
    with pytest.raises(ValueError):
        parse_bool("perhaps")


def test_logger_is_shared():
    logger = ProgramHubLogger()
    assert logger is ProgramHubLogger()
    assert isinstance(logger, logging.Logger)
    assert logger.name == "programhub"


def test_normalization():
    oid = ObjectId()
    created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    doc = {"_id": oid, "createdAt": created, "courses": [{"_id": oid, "tags": ("a", "b")}], "rating": 4}
    assert normalize_doc(doc) == {
        "_id": str(oid),
        "createdAt": "2024-05-01T12:30:00+00:00",
        "courses": [{"_id": str(oid), "tags": ["a", "b"]}],
        "rating": 4,
    }
    envelope = ResultEnvelope(data=[{"_id": oid}], pagination={"next": {"page": 2, "limit": 1}})
    assert normalize_envelope(envelope) == {
        "success": True,
        "count": 1,
        "pagination": {"next": {"page": 2, "limit": 1}},
        "data": [{"_id": str(oid)}],
    }


def test_project_name_comes_from_settings():
    assert configs.PROJECT_NAME == configs.settings["project"]["name"] == "programhub"
    assert ProgramHubLogger().name == configs.PROJECT_NAME
