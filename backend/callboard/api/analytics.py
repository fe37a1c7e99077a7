from fastapi import APIRouter, Depends, Query

from callboard.core.deps import get_ringcentral_client
from callboard.schemas import AnalyticsResponse, CommunicationsResponse, DailyResponse
from callboard.services.analytics import (
    fetch_activity,
    fetch_communications,
    fetch_daily_calls,
    resolve_period,
)
from callboard.services.reports import daily_series, filter_by_user
from callboard.services.ringcentral_client import RingCentralClient

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    user: str | None = None,
    client: RingCentralClient = Depends(get_ringcentral_client),
):
    period = resolve_period(date_from, date_to, time_zone=client.time_zone)
    records = filter_by_user(fetch_activity(client, period), user)
    return AnalyticsResponse(period=period.echo(), records=records)


@router.get("/daily", response_model=DailyResponse)
def get_daily_analytics(
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    client: RingCentralClient = Depends(get_ringcentral_client),
):
    period = resolve_period(date_from, date_to, time_zone=client.time_zone)
    counts = fetch_daily_calls(client, period)
    points = daily_series(counts, period.start_date, period.end_date)
    return DailyResponse(period=period.echo(), points=points)


@router.get("/communications", response_model=CommunicationsResponse)
def get_communications(
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    client: RingCentralClient = Depends(get_ringcentral_client),
):
    period = resolve_period(date_from, date_to, time_zone=client.time_zone)
    return CommunicationsResponse(period=period.echo(), **fetch_communications(client, period))
