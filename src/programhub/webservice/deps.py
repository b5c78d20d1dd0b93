"""Dependency providers for ProgramHub webservice."""

from typing import Dict, List, Union

from fastapi import Request

from programhub.programhub_api.db_api import DBAPI
from programhub.query.parser import query_request_from_pairs


def get_db_api(request: Request) -> DBAPI:
    """Return the application's shared DB API facade."""
    return request.app.state.db_api


def get_query_request(request: Request) -> Dict[str, Union[str, List[str]]]:
    """Raw query parameters of the request, repeated keys folded into lists."""
    return query_request_from_pairs(request.query_params.multi_items())
