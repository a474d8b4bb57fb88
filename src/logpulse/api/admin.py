"""
Admin API endpoints for LogPulse.

Provides configuration reload and status.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from ..config import load_configuration, reload_settings
from ..core.admission import AdmissionService, options_from_settings
from ..core.auth import authenticate_admin_token
from ..core.pv_filter import get_pv_filter_engine
from ..models.admin import ErrorResponse, ReloadResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


def _get_admission(request: Request) -> AdmissionService:
    admission = getattr(request.app.state, "admission", None)
    if admission is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admission service not available",
        )
    return admission


@router.post(
    "/v1/admin/reload",
    response_model=ReloadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Configuration file unreadable or malformed"},
        401: {"model": ErrorResponse, "description": "Unauthorized - admin token required"},
        422: {"model": ErrorResponse, "description": "Configuration validation failed"},
        500: {"model": ErrorResponse, "description": "PV filter could not be built"},
    },
    summary="Reload configuration",
    description="""
    Re-read settings and the configuration file, validate, and publish a
    new PV filter snapshot.

    **Admin Operation:**
    - Requires admin token authentication
    - A configuration with validation errors is rejected (422) and the
      current filter stays active
    - An exclude pattern that does not compile is rejected (500) and the
      current filter stays active
    """,
)
async def reload_configuration(
    request: Request,
    admin_token: str = Depends(authenticate_admin_token),
) -> ReloadResponse:
    """Reload and re-admit the configuration."""
    logger.info("Configuration reload requested", admin_token=admin_token[:8] + "...")
    admission = _get_admission(request)

    settings = reload_settings()
    cfg = await run_in_threadpool(load_configuration, settings.config_path)

    state = await run_in_threadpool(
        admission.admit, cfg, options_from_settings(settings), settings.setup_mode
    )

    logger.info(
        "Configuration reloaded",
        websites=len(cfg.websites),
        warnings=len(admission.last_result.warnings),
    )

    return ReloadResponse(
        message="Configuration reloaded",
        validation=admission.last_result,
        filter_rules={
            "status_codes": len(state.status_codes),
            "exclude_patterns": len(state.compiled_patterns),
            "exclude_ips": len(state.exclude_ips),
        },
    )


@router.get("/v1/admin/status")
async def get_admin_status(
    request: Request,
    admin_token: str = Depends(authenticate_admin_token),
) -> Dict[str, Any]:
    """
    Get admin status information.

    Returns the state of the PV filter and the last validation.
    """
    logger.debug("Admin status requested", admin_token=admin_token[:8] + "...")

    admission = getattr(request.app.state, "admission", None)
    state = get_pv_filter_engine().snapshot()
    last_result = admission.last_result if admission is not None else None

    return {
        "pv_filter": {
            "initialized": state is not None,
            "status_codes": sorted(state.status_codes) if state else [],
            "exclude_patterns": [p.pattern for p in state.compiled_patterns] if state else [],
            "exclude_ips": sorted(state.exclude_ips) if state else [],
        },
        "validation": {
            "validated": last_result is not None,
            "errors": len(last_result.errors) if last_result else 0,
            "warnings": len(last_result.warnings) if last_result else 0,
            "admitted": admission is not None and admission.admitted_result is not None,
        },
        "metrics": {
            "available": hasattr(request.app.state, "metrics"),
        },
    }
