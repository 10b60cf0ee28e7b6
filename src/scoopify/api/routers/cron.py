"""Cron-triggered business intelligence endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...core.context import get_request_id
from ...core.jobs import JobQueueUnavailableError, enqueue_business_intelligence
from ...deps import CronSecretDependency, SessionFactoryDependency, SettingsDependency
from ...errors import ServiceUnavailableError
from ...schemas.intelligence import IntelligenceRunResponse
from ...schemas.report import JobEnqueueResponse
from ...schemas.system import CronFailureResponse, ErrorResponse
from ...services import BusinessIntelligenceService

logger = logging.getLogger("scoopify.api.cron")

CRON_FAILURE_MESSAGE = "Failed to process business intelligence"

router = APIRouter(
    prefix="/cron",
    tags=["cron"],
    dependencies=[CronSecretDependency],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)


def _as_timezone_aware(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@router.post(
    "/business-intelligence",
    response_model=IntelligenceRunResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": CronFailureResponse}},
    summary="Generate the weekly business intelligence report",
)
async def run_business_intelligence(
    settings: SettingsDependency,
    session_factory: SessionFactoryDependency,
):
    """Compute, store and announce this week's report.

    Calling it again within the same week returns the fresh computation with
    ``duplicate`` set and leaves the stored report untouched.
    """

    service = BusinessIntelligenceService.from_settings(settings, session_factory)
    try:
        run = await service.run()
    except Exception:
        logger.exception("Business intelligence cron run failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CronFailureResponse(error=CRON_FAILURE_MESSAGE).model_dump(),
        )
    return IntelligenceRunResponse(
        success=True,
        results=run.results,
        report_id=run.report_id,
        duplicate=run.duplicate,
    )


@router.post(
    "/business-intelligence/enqueue",
    response_model=JobEnqueueResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}},
    summary="Enqueue a business intelligence run on the background worker",
)
async def enqueue_business_intelligence_run() -> JobEnqueueResponse:
    request_id = get_request_id()
    try:
        job = enqueue_business_intelligence(request_id=None if request_id == "-" else request_id)
    except JobQueueUnavailableError as exc:
        raise ServiceUnavailableError("Background job queue is unavailable.") from exc

    return JobEnqueueResponse(
        job_id=job.id,
        queue=job.origin or "default",
        enqueued_at=_as_timezone_aware(job.enqueued_at),
    )


__all__ = ["CRON_FAILURE_MESSAGE", "router"]
