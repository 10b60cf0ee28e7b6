"""Business intelligence run as an RQ job and as a one-shot CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime
from typing import Any

from rq import get_current_job

from ..core.config import get_settings
from ..core.context import bind_job_id, bind_request_id, clear_request_id, reset_job_id, reset_request_id
from ..core.jobs import execute_with_job_sessions
from ..core.logging import configure_logging
from ..db.session import SessionFactory
from ..services.intelligence import BusinessIntelligenceService, IntelligenceRun

logger = logging.getLogger("scoopify.jobs.intelligence")


async def _run_business_intelligence(now: datetime | None = None) -> IntelligenceRun:
    async def _invoke(session_factory: SessionFactory) -> IntelligenceRun:
        service = BusinessIntelligenceService.from_settings(get_settings(), session_factory)
        return await service.run(now=now)

    return await execute_with_job_sessions(_invoke)


def _summarise(run: IntelligenceRun) -> dict[str, Any]:
    return {
        "report_id": run.report_id,
        "duplicate": run.duplicate,
        "persisted": run.persisted,
        "risks": run.results.risk_assessment.total_risks,
        "recommendations": len(run.results.recommendations),
        "alerts": len(run.results.alerts),
        "degraded_sections": [failure.section for failure in run.results.degraded_sections],
    }


def run_business_intelligence_job(request_id: str | None = None) -> dict[str, Any]:
    """Generate and persist the weekly report; the return value is kept as the job result."""

    job = get_current_job()
    job_token = bind_job_id(job.id) if job is not None else None
    request_token = None
    if request_id:
        request_token = bind_request_id(request_id)
    else:
        clear_request_id()

    try:
        summary = _summarise(asyncio.run(_run_business_intelligence()))
        logger.info("Business intelligence job completed", extra=summary)
        return summary
    finally:
        if request_token is not None:
            reset_request_id(request_token)
        else:
            clear_request_id()
        if job_token is not None:
            reset_job_id(job_token)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the weekly business intelligence report once.")
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="ISO timestamp to report as of (defaults to the current UTC time).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``scoopify-bi``."""

    args = _parse_args(argv)
    configure_logging(get_settings())
    run = asyncio.run(_run_business_intelligence(args.now))
    print(json.dumps(_summarise(run)))
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(main())
