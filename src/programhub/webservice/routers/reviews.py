"""Review endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from programhub.commons.vocabulary import FIELD_TYPES, RELATIONSHIPS, Collections
from programhub.configs import QUERY_DEFAULT_SORT_FIELD
from programhub.programhub_api.db_api import DBAPI
from programhub.query.advanced_results import AdvancedResults
from programhub.query.population import PopulationSpec, Populator
from programhub.webservice.deps import get_db_api, get_query_request
from programhub.webservice.schemas.common import ERROR_RESPONSES, DataResponse, ListResponse
from programhub.webservice.schemas.resources import ReviewCreate
from programhub.webservice.services.serializers import normalize_doc, normalize_envelope

router = APIRouter(prefix="/reviews", tags=["reviews"], responses=ERROR_RESPONSES)
program_reviews_router = APIRouter(
    prefix="/programs/{program_id}/reviews",
    tags=["reviews"],
    responses=ERROR_RESPONSES,
)

PROGRAM_SUMMARY = PopulationSpec.of("program", "name,description")

review_results = AdvancedResults(
    Collections.REVIEWS,
    RELATIONSHIPS,
    population=PROGRAM_SUMMARY,
    field_types=FIELD_TYPES[Collections.REVIEWS],
    default_sort_field=QUERY_DEFAULT_SORT_FIELD,
)
review_detail = Populator(Collections.REVIEWS, PROGRAM_SUMMARY, RELATIONSHIPS)


@router.get("", response_model=ListResponse)
def list_reviews(
    params: Dict[str, Any] = Depends(get_query_request),
    db: DBAPI = Depends(get_db_api),
) -> ListResponse:
    """List reviews with filtering, selection, sorting, pagination and their program."""
    envelope = db.advanced_results(review_results, params)
    return ListResponse(**normalize_envelope(envelope))


@router.get("/{review_id}", response_model=DataResponse)
def get_review(review_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Get a review by id, with its program."""
    return DataResponse(data=normalize_doc(db.get_review(review_id, populator=review_detail)))


@router.delete("/{review_id}", response_model=DataResponse)
def delete_review(review_id: str, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Delete a review."""
    db.delete_review(review_id)
    return DataResponse(data={})


@program_reviews_router.get("", response_model=ListResponse)
def list_program_reviews(
    program_id: str,
    params: Dict[str, Any] = Depends(get_query_request),
    db: DBAPI = Depends(get_db_api),
) -> ListResponse:
    """List the reviews of one program, with the same query options as the top-level list."""
    envelope = db.program_children(review_results, program_id, params)
    return ListResponse(**normalize_envelope(envelope))


@program_reviews_router.post("", response_model=DataResponse, status_code=201)
def add_review(program_id: str, payload: ReviewCreate, db: DBAPI = Depends(get_db_api)) -> DataResponse:
    """Add a review to a program."""
    doc = db.add_review(program_id, payload.model_dump(mode="json"))
    return DataResponse(data=normalize_doc(doc))
