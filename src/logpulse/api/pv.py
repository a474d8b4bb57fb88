"""
PV classification endpoint.

POST /v1/pv:classify lets ingestion workers and operators run parsed
records through the current PV filter.
"""

import structlog
from fastapi import APIRouter, Request

from ..core.exceptions import FilterNotInitializedError
from ..core.pv_filter import get_pv_filter_engine
from ..models.admin import ErrorResponse
from ..models.pv import ClassifyRequest, ClassifyResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/pv:classify",
    response_model=ClassifyResponse,
    responses={
        503: {"model": ErrorResponse, "description": "PV filter not initialized"},
    },
    summary="Classify log records",
    description="""
    Decide for each record whether it counts as a page view.

    **Checks, in order:**
    1. Status code is in `statusCodeInclude`
    2. Client address is not private, loopback, link-local or reserved
    3. Client address is not in `excludeIPs`
    4. Path matches none of `excludePatterns`

    All records of one request are evaluated against the same filter snapshot.
    """,
)
async def classify_records(body: ClassifyRequest, request: Request) -> ClassifyResponse:
    engine = get_pv_filter_engine()
    state = engine.snapshot()
    if state is None:
        raise FilterNotInitializedError()

    results = [state.classify(r.status_code, r.path, r.ip) for r in body.records]
    accepted = sum(1 for r in results if r)
    rejected = len(results) - accepted

    metrics = getattr(request.app.state, "metrics", None)
    if metrics:
        metrics.record_decisions(accepted, rejected)

    logger.debug("Records classified", records=len(results), accepted=accepted, rejected=rejected)

    return ClassifyResponse(results=results, accepted=accepted, rejected=rejected)
