"""
Configuration validation endpoints.

- POST /v1/config:validate - validate a submitted configuration tree
- GET /v1/config/validation - result of the last startup/reload validation
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from ..config import parse_configuration
from ..core.validator import validate_config
from ..models.admin import ErrorResponse, ValidateRequest
from ..models.validation import ValidateOptions, ValidationResult

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/config:validate",
    response_model=ValidationResult,
    responses={
        400: {"model": ErrorResponse, "description": "Body does not match the configuration structure"},
    },
    summary="Validate a configuration",
    description="""
    Validate a configuration tree without applying it.

    Returns every error and warning found, in check order. A result with
    errors is still a 200 response: the errors are the answer.
    Path checks run against this host's filesystem when `checkPaths` is set.
    """,
)
async def validate_configuration(body: ValidateRequest, request: Request) -> ValidationResult:
    """Validate a submitted configuration."""
    cfg = parse_configuration(body.config)
    opts = ValidateOptions(check_paths=body.check_paths, check_remote=body.check_remote)

    admission = getattr(request.app.state, "admission", None)
    if admission is not None:
        result = await run_in_threadpool(admission.validate, cfg, opts)
    else:
        result = await run_in_threadpool(validate_config, cfg, opts)

    logger.info(
        "Ad-hoc configuration validation",
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


@router.get(
    "/config/validation",
    summary="Last validation result",
)
async def last_validation(request: Request) -> Dict[str, Any]:
    """Result of the validation performed at startup or on the last reload."""
    admission = getattr(request.app.state, "admission", None)
    result = admission.last_result if admission is not None else None

    if result is None:
        return {"validated": False, "result": None}

    return {"validated": True, "result": result.model_dump()}
