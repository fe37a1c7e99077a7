from typing import List, Tuple

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse

from callboard.core.config import settings
from callboard.core.deps import get_ringcentral_client
from callboard.schemas import (
    DailyPoint,
    Period,
    QuickRangesResponse,
    ReportResponse,
    UserActivity,
)
from callboard.services.analytics import (
    ResolvedPeriod,
    fetch_activity,
    fetch_daily_calls,
    local_today,
    resolve_period,
)
from callboard.services.exports import render_csv, render_print_html, render_xlsx
from callboard.services.reports import (
    QUICK_RANGES,
    build_report,
    chart_series,
    daily_series,
    filter_by_user,
    quick_range,
    report_filename,
    sort_rows,
    total_calls,
)
from callboard.services.ringcentral_client import RingCentralClient

router = APIRouter(prefix="/api/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def collect_report_data(
    client: RingCentralClient,
    period: ResolvedPeriod,
    user: str | None,
    sort_field: str,
    sort_order: str,
) -> Tuple[List[UserActivity], List[UserActivity], List[DailyPoint]]:
    users = fetch_activity(client, period)
    records = sort_rows(filter_by_user(users, user), sort_field, sort_order)
    daily = daily_series(fetch_daily_calls(client, period), period.start_date, period.end_date)
    return users, records, daily


@router.get("", response_model=ReportResponse)
def get_report(
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    user: str | None = None,
    sort_field: str = Query("calls", alias="sortField"),
    sort_order: str = Query("desc", alias="sortOrder"),
    client: RingCentralClient = Depends(get_ringcentral_client),
):
    period = resolve_period(date_from, date_to, time_zone=client.time_zone)
    users, records, daily = collect_report_data(client, period, user, sort_field, sort_order)
    return ReportResponse(
        company_name=settings.company_name,
        period=period.echo(),
        users=users,
        records=records,
        total_calls=total_calls(records),
        chart=chart_series(records),
        daily=daily,
    )


@router.get("/ranges", response_model=QuickRangesResponse)
def get_quick_ranges(client: RingCentralClient = Depends(get_ringcentral_client)):
    today = local_today(client.time_zone)
    ranges = {}
    for name in QUICK_RANGES:
        start, end = quick_range(name, today)
        ranges[name] = Period(from_=start.isoformat(), to=end.isoformat())
    return QuickRangesResponse(time_zone=client.time_zone, today=today.isoformat(), ranges=ranges)


@router.get("/export")
def export_report(
    format: str = Query(..., pattern="^(csv|xlsx|pdf)$"),
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    user: str | None = None,
    sort_field: str = Query("calls", alias="sortField"),
    sort_order: str = Query("desc", alias="sortOrder"),
    client: RingCentralClient = Depends(get_ringcentral_client),
) -> Response:
    period = resolve_period(date_from, date_to, time_zone=client.time_zone)
    _, records, daily = collect_report_data(client, period, user, sort_field, sort_order)
    report = build_report(
        settings.company_name, period.start_date, period.end_date, records, daily
    )
    today = local_today(client.time_zone)
    if format == "csv":
        filename = report_filename(settings.company_name, "csv", today)
        return Response(
            content=render_csv(report),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
    if format == "xlsx":
        filename = report_filename(settings.company_name, "xlsx", today)
        return Response(
            content=render_xlsx(report),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
    filename = report_filename(settings.company_name, "html", today)
    return HTMLResponse(
        content=render_print_html(report),
        headers={"Content-Disposition": f"inline; filename={filename}"},
    )
