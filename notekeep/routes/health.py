"""
Notekeep Backend: Health Check Route
=====================================

What:  GET /health, the liveness/health probe.
How:   Pings the store to refresh its connection state, samples process
       memory and uptime, and hands both to evaluate_health().
Who:   Container health checks, load balancers, operators.

Status codes:
    200  healthy   (store connected, RSS < 200 MB, heap used < 150 MB)
    500  unhealthy (body additionally carries actionableMessage), including
         when process metrics cannot be read
"""

import logging

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notekeep.dependencies import get_note_store
from notekeep.schemas.health import HealthReport
from notekeep.services.health_service import (
    evaluate_health,
    metrics_unavailable_report,
    probe_process,
)
from notekeep.store.base import ConnectionState, NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthReport,
    responses={
        200: {"description": "Service is healthy", "model": HealthReport},
        500: {"description": "Service is unhealthy", "model": HealthReport},
    },
    summary="Service health check",
)
async def health_check(store: NoteStore = Depends(get_note_store)) -> JSONResponse:
    """
    Report store connectivity, memory usage and uptime.

    The report is computed fresh on every call.
    """
    try:
        state = await store.ping()
    except Exception as e:
        logger.warning("Health check: note store unreachable: %s", str(e))
        state = ConnectionState.DISCONNECTED

    try:
        metrics = probe_process()
    except psutil.Error as e:
        logger.error("Process metrics unavailable: %s", str(e), exc_info=e)
        report = metrics_unavailable_report(state)
    else:
        report = evaluate_health(state, metrics.memory, metrics.uptime_seconds)

    if not report.is_healthy:
        logger.warning("Health check unhealthy: %s", report.actionable_message)

    return JSONResponse(
        status_code=200 if report.is_healthy else 500,
        content=report.model_dump(by_alias=True, exclude_none=True),
    )
