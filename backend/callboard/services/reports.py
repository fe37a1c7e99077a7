import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from callboard.core.errors import ValidationError
from callboard.schemas import ChartPoint, DailyPoint, UserActivity
from callboard.services.analytics import day_range

SORT_FIELDS = ("name", "calls")
SORT_ORDERS = ("asc", "desc")
QUICK_RANGES = ("today", "week", "month")


@dataclass
class Report:
    company_name: str
    period_label: str
    rows: List[UserActivity]
    daily: List[DailyPoint]
    total_calls: int
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def active_days(self) -> List[DailyPoint]:
        return [point for point in self.daily if point.calls > 0]


def filter_by_user(rows: List[UserActivity], selection: Optional[str]) -> List[UserActivity]:
    if not selection:
        return rows
    return [
        row for row in rows if row.extension_number == selection or row.user_id == selection
    ]


def sort_rows(
    rows: List[UserActivity], field: str = "calls", order: str = "desc"
) -> List[UserActivity]:
    if field not in SORT_FIELDS:
        raise ValidationError(f"Unknown sort field: {field}", message="Invalid sort")
    if order not in SORT_ORDERS:
        raise ValidationError(f"Unknown sort order: {order}", message="Invalid sort")
    if field == "name":
        return sorted(rows, key=lambda row: row.user_name, reverse=order == "desc")
    return sorted(rows, key=lambda row: row.calls.total, reverse=order == "desc")


def total_calls(rows: List[UserActivity]) -> int:
    return sum(row.calls.total for row in rows)


def chart_series(rows: List[UserActivity]) -> List[ChartPoint]:
    return [
        ChartPoint(name=f"{row.user_name} ({row.extension_number})", calls=row.calls.total)
        for row in rows
        if row.calls.total > 0
    ]


def day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def long_date(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}"


def daily_series(counts: Dict[date, int], start: date, end: date) -> List[DailyPoint]:
    return [
        DailyPoint(date=day.isoformat(), label=day_label(day), calls=counts.get(day, 0))
        for day in day_range(start, end)
    ]


def quick_range(name: str, today: date) -> Tuple[date, date]:
    if name == "today":
        return today, today
    if name == "week":
        # weeks start on Sunday
        return today - timedelta(days=(today.weekday() + 1) % 7), today
    if name == "month":
        return today.replace(day=1), today
    raise ValidationError(f"Unknown range: {name}", message="Invalid date range")


def period_label(start: date, end: date) -> str:
    return f"Report Period: {long_date(start)} - {long_date(end)}"


def build_report(
    company_name: str,
    start: date,
    end: date,
    rows: List[UserActivity],
    daily: List[DailyPoint],
) -> Report:
    return Report(
        company_name=company_name,
        period_label=period_label(start, end),
        rows=rows,
        daily=daily,
        total_calls=total_calls(rows),
    )


def report_filename(company_name: str, extension: str, today: date) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", company_name).strip("-")
    return f"{slug}-Call-Analytics-{today.isoformat()}.{extension}"
