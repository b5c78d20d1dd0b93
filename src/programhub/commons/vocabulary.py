"""Vocabulary module: collection names, enumerations, field types and relationships."""

from datetime import datetime
from enum import Enum

from bson import ObjectId

from programhub.commons.relationships import Relationship, RelationshipRegistry


class Collections:
    """Collection names."""

    PROGRAMS = "programs"
    COURSES = "courses"
    REVIEWS = "reviews"


class Career(str, Enum):
    """Careers a program prepares for."""

    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    UI_UX = "UI/UX"
    DATA_SCIENCE = "Data Science"
    BUSINESS = "Business"
    OTHER = "Other"


class MinimumSkill(str, Enum):
    """Skill level a course expects from its students."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def parse_bool(value: str) -> bool:
    """Parse a query-string boolean."""
    text = value.strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing ``Z``."""
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


# Query-string coercions per collection. Fields missing here are compared as strings.
FIELD_TYPES = {
    Collections.PROGRAMS: {
        "_id": ObjectId,
        "averageCost": float,
        "averageRating": float,
        "housing": parse_bool,
        "jobAssistance": parse_bool,
        "jobGuarantee": parse_bool,
        "acceptGi": parse_bool,
        "createdAt": parse_datetime,
        "location.zipcode": str,
    },
    Collections.COURSES: {
        "_id": ObjectId,
        "weeks": int,
        "tuition": float,
        "scholarshipAvailable": parse_bool,
        "createdAt": parse_datetime,
        "program": ObjectId,
    },
    Collections.REVIEWS: {
        "_id": ObjectId,
        "rating": int,
        "createdAt": parse_datetime,
        "program": ObjectId,
    },
}

RELATIONSHIPS = RelationshipRegistry()
RELATIONSHIPS.register(
    Collections.PROGRAMS,
    Relationship("courses", Collections.COURSES, local_field="_id", foreign_field="program", many=True, cascade=True),
)
RELATIONSHIPS.register(
    Collections.PROGRAMS,
    Relationship("reviews", Collections.REVIEWS, local_field="_id", foreign_field="program", many=True, cascade=True),
)
RELATIONSHIPS.register(
    Collections.COURSES,
    Relationship("program", Collections.PROGRAMS, local_field="program", foreign_field="_id"),
)
RELATIONSHIPS.register(
    Collections.REVIEWS,
    Relationship("program", Collections.PROGRAMS, local_field="program", foreign_field="_id"),
)
