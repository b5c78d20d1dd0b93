"""Program endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from programhub.commons.vocabulary import FIELD_TYPES, RELATIONSHIPS, Collections
from programhub.configs import QUERY_DEFAULT_SORT_FIELD
from programhub.programhub_api.db_api import DBAPI
from programhub.query.advanced_results import AdvancedResults
from programhub.query.population import PopulationSpec, Populator
from programhub.webservice.deps import get_db_api, get_query_request
from programhub.webservice.schemas.common import ERROR_RESPONSES, CollectionResponse, DataResponse, ListResponse
from programhub.webservice.schemas.resources import ProgramCreate, ProgramUpdate
from programhub.webservice.services.serializers import normalize_doc, normalize_docs, normalize_envelope

router = APIRouter(prefix="/programs", tags=["programs"], responses=ERROR_RESPONSES)

COURSES_SUMMARY = PopulationSpec.of("courses", "title,weeks,tuition,minimumSkill")

program_results = AdvancedResults(
    Collections.PROGRAMS,
    RELATIONSHIPS,
    population=COURSES_SUMMARY,
    field_types=FIELD_TYPES[Collections.PROGRAMS],
    default_sort_field=QUERY_DEFAULT_SORT_FIELD,
)
program_detail = Populator(Collections.PROGRAMS, COURSES_SUMMARY, RELATIONSHIPS)


@router.get("", response_model=ListResponse)
def list_programs(
    params: Dict[str, Any] = Depends(get_query_request),
    db: DBAPI = Depends(get_db_api),
) -> ListResponse:
    """List programs with filtering, selection, sorting, pagination and their courses."""
    envelope = db.advanced_results(program_results, params)
    return ListResponse(**normalize_envelope(envelope))


@router.get("/radius/{zipcode}/{distance}", response_model=CollectionResponse)
def list_programs_in_radius(zipcode: str, distance: str, db: DBAPI = Depends(get_db_api)) -> CollectionResponse:
    """List every program within ``distance`` of ``zipcode`` (unit set by configuration)."""
    docs = normalize_docs(db.programs_in_radius(zipcode, distance))
    return CollectionResponse(count=len(docs), data=docs)


@router.get("/{program_id}", response_model=DataResponse)
def get_program(program_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Get a program by id, with its courses."""
    return DataResponse(data=normalize_doc(db.get_program(program_id, populator=program_detail)))


@router.post("", response_model=DataResponse, status_code=201)
def create_program(payload: ProgramCreate, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Create a program, geocoding its address."""
    doc = db.create_program(payload.model_dump(mode="json", exclude_none=True))
    return DataResponse(data=normalize_doc(doc))


@router.put("/{program_id}", response_model=DataResponse)
def update_program(program_id: str, payload: ProgramUpdate, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Update a program."""
    doc = db.update_program(program_id, payload.model_dump(mode="json", exclude_unset=True, exclude_none=True))
    return DataResponse(data=normalize_doc(doc))


@router.delete("/{program_id}", response_model=DataResponse)
def delete_program(program_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Delete a program and, before it, its courses and reviews."""
    db.delete_program(program_id)
    return DataResponse(data={})
