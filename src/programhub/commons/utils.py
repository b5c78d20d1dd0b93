"""Utilities module."""

from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from programhub.commons.exceptions import NotFoundError


def to_object_id(resource: str, resource_id) -> ObjectId:
    """Convert a path id to an ``ObjectId``.

    An id that is not a valid ObjectId cannot match any document, so it is
    reported as not found rather than as a validation error.
    """
    if isinstance(resource_id, ObjectId):
        return resource_id
    try:
        return ObjectId(str(resource_id))
    except (InvalidId, TypeError):
        raise NotFoundError(resource, resource_id) from None


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)
