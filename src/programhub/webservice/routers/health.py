"""Health endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from programhub.programhub_api.db_api import DBAPI
from programhub.webservice.deps import get_db_api

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
def live() -> dict:
    """Liveness check."""
    return {"status": "ok"}


@router.get("/ready")
def ready(db: DBAPI = Depends(get_db_api)):
    """Readiness check. Ready once the document store answers."""
    if db.liveness_test():
        return {"status": "ready"}
    return JSONResponse(status_code=503, content={"status": "unavailable"})
