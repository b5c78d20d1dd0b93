"""Course endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from programhub.commons.vocabulary import FIELD_TYPES, RELATIONSHIPS, Collections
from programhub.configs import QUERY_DEFAULT_SORT_FIELD
from programhub.programhub_api.db_api import DBAPI
from programhub.query.advanced_results import AdvancedResults
from programhub.query.population import PopulationSpec, Populator
from programhub.webservice.deps import get_db_api, get_query_request
from programhub.webservice.schemas.common import ERROR_RESPONSES, DataResponse, ListResponse
from programhub.webservice.schemas.resources import CourseCreate, CourseUpdate
from programhub.webservice.services.serializers import normalize_doc, normalize_envelope

router = APIRouter(prefix="/courses", tags=["courses"], responses=ERROR_RESPONSES)
program_courses_router = APIRouter(
    prefix="/programs/{program_id}/courses",
    tags=["courses"],
    responses=ERROR_RESPONSES,
)

PROGRAM_SUMMARY = PopulationSpec.of("program", "name,description,averageCost")

course_results = AdvancedResults(
    Collections.COURSES,
    RELATIONSHIPS,
    population=PROGRAM_SUMMARY,
    field_types=FIELD_TYPES[Collections.COURSES],
    default_sort_field=QUERY_DEFAULT_SORT_FIELD,
)
course_detail = Populator(Collections.COURSES, PROGRAM_SUMMARY, RELATIONSHIPS)


@router.get("", response_model=ListResponse)
def list_courses(
    params: Dict[str, Any] = Depends(get_query_request),
    db: DBAPI = Depends(get_db_api),
) -> ListResponse:
    """List courses with filtering, selection, sorting, pagination and their program."""
    envelope = db.advanced_results(course_results, params)
    return ListResponse(**normalize_envelope(envelope))


@router.get("/{course_id}", response_model=DataResponse)
def get_course(course_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Get a course by id, with its program."""
    return DataResponse(data=normalize_doc(db.get_course(course_id, populator=course_detail)))


@router.put("/{course_id}", response_model=DataResponse)
def update_course(course_id: str, payload: CourseUpdate, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Update a course."""
    doc = db.update_course(course_id, payload.model_dump(mode="json", exclude_unset=True, exclude_none=True))
    return DataResponse(data=normalize_doc(doc))


@router.delete("/{course_id}", response_model=DataResponse)
def delete_course(course_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Delete a course."""
    db.delete_course(course_id)
    return DataResponse(data={})


@program_courses_router.get("", response_model=ListResponse)
def list_program_courses(
    program_id: str,
    params: Dict[str, Any] = Depends(get_query_request),
    db: DBAPI = Depends(get_db_api),
) -> ListResponse:
    """List the courses of one program, with the same query options as the top-level list."""
    envelope = db.program_children(course_results, program_id, params)
    return ListResponse(**normalize_envelope(envelope))


@program_courses_router.post("", response_model=DataResponse, status_code=201)
def add_course(program_id: str, payload: CourseCreate, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Add a course to a program."""
    doc = db.add_course(program_id, payload.model_dump(mode="json"))
    return DataResponse(data=normalize_doc(doc))
