"""Report endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status
from fastapi.responses import PlainTextResponse

from app.dependencies import Reports
from app.schemas.reports import CancellationReport, DayReport, DayStatistics

router = APIRouter()


@router.get(
    "/daily/statistics",
    response_model=DayStatistics,
    status_code=status.HTTP_200_OK,
    summary="Daily statistics",
)
async def get_day_statistics(
    reports: Reports,
    on: date | None = Query(None, description="Report day, today when omitted"),
) -> DayStatistics:
    """Count a day's appointments by status."""
    return reports.day_statistics(on)


@router.get(
    "/daily",
    response_model=DayReport,
    status_code=status.HTTP_200_OK,
    summary="Daily report",
)
async def get_day_report(
    reports: Reports,
    on: date | None = Query(None, description="Report day, today when omitted"),
) -> DayReport:
    """Build the structured daily report."""
    return reports.day_report(on)


@router.get(
    "/daily/text",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Daily report as text",
)
async def get_day_report_text(
    reports: Reports,
    on: date | None = Query(None, description="Report day, today when omitted"),
) -> str:
    """Render the daily report as plain text."""
    return reports.render_day_report(reports.day_report(on))


@router.get(
    "/cancellations",
    response_model=CancellationReport,
    status_code=status.HTTP_200_OK,
    summary="Cancellation report",
)
async def get_cancellation_report(
    reports: Reports,
    start: date | None = Query(None),
    end: date | None = Query(None),
) -> CancellationReport:
    """
    List cancellations recorded in the period.

    Raises:
        InvalidInputException: If start is after end
    """
    return reports.cancellation_report(start, end)


@router.get(
    "/cancellations/text",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancellation report as text",
)
async def get_cancellation_report_text(
    reports: Reports,
    start: date | None = Query(None),
    end: date | None = Query(None),
) -> str:
    """Render the cancellation report as plain text."""
    return reports.render_cancellation_report(reports.cancellation_report(start, end))
