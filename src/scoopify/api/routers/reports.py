"""Read access to stored business intelligence reports."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from ...deps import CronSecretDependency, DatabaseSessionDependency
from ...errors import NotFoundError
from ...schemas.report import BusinessReportList, BusinessReportRead, BusinessReportSummary
from ...schemas.system import ErrorResponse
from ...services import BusinessReportService

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[CronSecretDependency],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)

LimitQuery = Annotated[
    int,
    Query(ge=1, le=100, description="Maximum number of reports to return, newest first."),
]


@router.get(
    "/business-intelligence",
    response_model=BusinessReportList,
    summary="List recently generated business intelligence reports",
)
async def list_business_intelligence_reports(
    session: DatabaseSessionDependency,
    limit: LimitQuery = 10,
) -> BusinessReportList:
    reports = await BusinessReportService(session).list_reports(limit=limit)
    return BusinessReportList(
        items=[BusinessReportSummary.model_validate(report) for report in reports],
        limit=limit,
    )


@router.get(
    "/business-intelligence/{report_id}",
    response_model=BusinessReportRead,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    summary="Retrieve a stored business intelligence report",
)
async def get_business_intelligence_report(
    report_id: int,
    session: DatabaseSessionDependency,
) -> BusinessReportRead:
    report = await BusinessReportService(session).get_report(report_id)
    if report is None:
        raise NotFoundError("Report not found.", details={"report_id": report_id})
    return BusinessReportRead.model_validate(report)


__all__ = ["router"]
