"""FastAPI entrypoint for ProgramHub webservice."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from programhub.commons.daos.docdb_dao.mongodb_dao import MongoDBDAO
from programhub.commons.exceptions import ProgramHubError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.configs import (
    GEOCODER_API_KEY,
    GEOCODER_DISTANCE_UNIT,
    GEOCODER_PROVIDER,
    GEOCODER_TIMEOUT,
    GEOCODER_USER_AGENT,
    MONGO_CREATE_INDICES,
    MONGO_DB,
    MONGO_URI,
    QUERY_DEFAULT_LIMIT,
    QUERY_MAX_LIMIT,
    WEBSERVER_HOST,
    WEBSERVER_PORT,
)
from programhub.geo.geocoder import Geocoder
from programhub.programhub_api.db_api import DBAPI
from programhub.query.pagination import PaginationSettings
from programhub.webservice.routers.courses import program_courses_router
from programhub.webservice.routers.courses import router as courses_router
from programhub.webservice.routers.health import router as health_router
from programhub.webservice.routers.programs import router as programs_router
from programhub.webservice.routers.reviews import program_reviews_router
from programhub.webservice.routers.reviews import router as reviews_router


def build_db_api() -> DBAPI:
    """Build the DB API facade from the loaded settings."""
    return DBAPI(
        MongoDBDAO(MONGO_URI, MONGO_DB),
        PaginationSettings(default_limit=QUERY_DEFAULT_LIMIT, max_limit=QUERY_MAX_LIMIT),
        Geocoder(
            GEOCODER_PROVIDER,
            api_key=GEOCODER_API_KEY,
            user_agent=GEOCODER_USER_AGENT,
            timeout=GEOCODER_TIMEOUT,
        ),
        distance_unit=GEOCODER_DISTANCE_UNIT,
    )


def create_app(db_api: DBAPI | None = None, create_indices: bool = MONGO_CREATE_INDICES) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    db_api : DBAPI, optional
        Facade shared by every request. Built from the settings when omitted.
    create_indices : bool
        Create the store indices on startup.
    """
    logger = ProgramHubLogger()
    db_api = db_api or build_db_api()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if create_indices:
            db_api.create_indices()
        yield
        db_api.close()

    app = FastAPI(
        title="ProgramHub Webservice API",
        version="1.0.0",
        description=(
            "REST API for a directory of training programs, their courses and reviews. "
            "List endpoints support filtering, field selection, sorting and pagination."
        ),
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.db_api = db_api

    @app.exception_handler(ProgramHubError)
    async def programhub_error_handler(request: Request, exc: ProgramHubError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{where}: {first.get('msg', 'invalid request')}" if where else "Invalid request"
        return JSONResponse(status_code=400, content={"success": False, "error": message})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.get("/", tags=["health"])
    def root() -> dict:
        return {
            "status": "up",
            "service": "programhub-webservice",
            "host": WEBSERVER_HOST,
            "port": WEBSERVER_PORT,
        }

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(programs_router, prefix="/api/v1")
    app.include_router(program_courses_router, prefix="/api/v1")
    app.include_router(program_reviews_router, prefix="/api/v1")
    app.include_router(courses_router, prefix="/api/v1")
    app.include_router(reviews_router, prefix="/api/v1")

    return app


app = create_app()


def run():
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run("programhub.webservice.main:app", host=WEBSERVER_HOST, port=WEBSERVER_PORT)
