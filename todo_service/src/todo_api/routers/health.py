from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ..db import Database, get_database
from ..schemas import DatabaseStatus

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/", summary="Banner", response_class=PlainTextResponse)
def root() -> str:
    return "Todo service is running"


# PUBLIC_INTERFACE
@router.get("/health", summary="Liveness Probe", response_class=PlainTextResponse)
def health_check() -> str:
    """
    Liveness probe; answers OK whether or not the database is reachable.
    """
    return "OK"


# PUBLIC_INTERFACE
@router.get(
    "/dbactive",
    summary="Readiness Probe",
    response_model=DatabaseStatus,
    responses={503: {"model": DatabaseStatus, "description": "Database unreachable"}},
)
def database_check(database: Database = Depends(get_database)):
    """
    Readiness probe; runs a trivial query against the database.

    Returns:
        200 with healthy/connected, or 503 with unhealthy/disconnected.
    """
    if database.ping():
        return DatabaseStatus(status="healthy", database="connected")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=DatabaseStatus(status="unhealthy", database="disconnected").model_dump(),
    )
