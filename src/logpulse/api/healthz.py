"""
Health check endpoints.

- /healthz: Liveness check (always 200 if service alive)
- /readyz: Readiness check (200 only once a valid configuration has been
  admitted and the PV filter is published)
"""

from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request, Response, status

from .. import __version__
from ..core.pv_filter import get_pv_filter_engine

logger = structlog.get_logger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get(
    "/healthz",
    status_code=200,
    summary="Liveness check",
    description="""
    Liveness endpoint.

    Always returns 200 OK if the service is running.
    """,
)
async def liveness_check() -> Dict[str, Any]:
    """
    Liveness check - always returns 200 if service is alive.
    """
    return {
        "status": "alive",
        "timestamp": _now(),
        "service": "logpulse",
        "version": __version__,
    }


@router.get(
    "/readyz",
    summary="Readiness check",
    description="""
    Readiness endpoint.

    Returns 200 only if:
    - a configuration passed validation and its PV filter snapshot is
      published (a rejected reload leaves the current snapshot in use)

    Returns 503 Service Unavailable otherwise, e.g. while in setup mode.
    """,
)
async def readiness_check(request: Request, response: Response) -> Dict[str, Any]:
    """
    Readiness check - returns 200 only when the pipeline may ingest.
    """
    admission = getattr(request.app.state, "admission", None)
    last_result = admission.last_result if admission is not None else None
    admitted = admission is not None and admission.admitted_result is not None

    checks = {
        "configuration": "valid" if admitted else "invalid",
        "pv_filter": "initialized" if get_pv_filter_engine().is_initialized else "not_initialized",
    }

    if admission is not None and admission.is_ready:
        response.status_code = status.HTTP_200_OK
        return {
            "status": "ready",
            "timestamp": _now(),
            "checks": checks,
        }

    logger.debug("Readiness check failed", checks=checks)
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "not_ready",
        "timestamp": _now(),
        "checks": checks,
        "errors": [e.model_dump() for e in last_result.errors] if last_result else [],
    }
