"""Call and SMS analytics pulled from RingCentral.

Aggregation rows come back from the vendor one per user. Call rows are the
source of truth for who appears in the dashboard; SMS counters are left-joined
onto them by grouping key.

Date-only inputs and "today" are read in the account time zone, the same one
sent to the vendor with every analytics query.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from callboard.core.errors import ValidationError
from callboard.schemas import (
    CallCounters,
    CallSummaryEntry,
    Period,
    SmsCounters,
    SmsSummaryEntry,
    UserActivity,
)
from callboard.services.ringcentral_client import RingCentralClient

logger = logging.getLogger(__name__)

FUTURE_RANGE = "Date range cannot include future dates."
INVERTED_RANGE = "From date cannot be after To date."


@dataclass
class ResolvedPeriod:
    start: datetime
    end: datetime
    zone: tzinfo = timezone.utc

    @property
    def start_date(self) -> date:
        return self.start.astimezone(self.zone).date()

    @property
    def end_date(self) -> date:
        return self.end.astimezone(self.zone).date()

    def vendor_from(self) -> str:
        return to_vendor_time(self.start)

    def vendor_to(self) -> str:
        return to_vendor_time(self.end)

    def echo(self) -> Period:
        return Period(from_=self.vendor_from(), to=self.vendor_to())


def to_vendor_time(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def local_today(time_zone: str = "UTC", now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(ZoneInfo(time_zone)).date()


def parse_date_input(
    value: str, end_of_day: bool = False, zone: tzinfo = timezone.utc
) -> datetime:
    cleaned = value.strip()
    try:
        if len(cleaned) == 10:
            day = date.fromisoformat(cleaned)
            moment = time.max if end_of_day else time.min
            return datetime.combine(day, moment, tzinfo=zone).astimezone(timezone.utc)
        parsed = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value!r}", message="Invalid date range") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed.astimezone(timezone.utc)


def resolve_period(
    date_from: Optional[str],
    date_to: Optional[str],
    now: Optional[datetime] = None,
    time_zone: str = "UTC",
) -> ResolvedPeriod:
    zone = ZoneInfo(time_zone)
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(zone).date()
    if date_from:
        start = parse_date_input(date_from, zone=zone)
    else:
        start = datetime.combine(today.replace(day=1), time.min, tzinfo=zone).astimezone(
            timezone.utc
        )
    if date_to:
        end = parse_date_input(date_to, end_of_day=True, zone=zone)
    else:
        end = now
    if (
        start > now
        or start.astimezone(zone).date() > today
        or end.astimezone(zone).date() > today
    ):
        raise ValidationError(FUTURE_RANGE, message="Invalid date range")
    end = min(end, now)
    if start > end:
        raise ValidationError(INVERTED_RANGE, message="Invalid date range")
    return ResolvedPeriod(start=start, end=end, zone=zone)


def _number(value: Any) -> int:
    if isinstance(value, (int, float)):
        return int(round(value))
    return 0


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _dicts(records: List[Any], label: str) -> List[Dict[str, Any]]:
    kept = [record for record in records if isinstance(record, dict)]
    if len(kept) != len(records):
        logger.warning("Skipped %s malformed %s records.", len(records) - len(kept), label)
    return kept


def _values(container: Dict[str, Any], name: str) -> Any:
    return _mapping(_mapping(container).get(name)).get("values")


def _breakdown(container: Dict[str, Any], name: str, key: str) -> int:
    return _number(_mapping(_values(container, name)).get(key))


def activity_from_call_record(record: Dict[str, Any]) -> UserActivity:
    info = _mapping(record.get("info"))
    counters = _mapping(record.get("counters"))
    timers = _mapping(record.get("timers"))
    key = str(record.get("key") or info.get("id") or "")
    return UserActivity(
        user_id=key,
        user_name=_text(info.get("name")) or f"Extension {key}",
        extension_number=_text(info.get("extensionNumber")),
        calls=CallCounters(
            total=_number(_values(counters, "allCalls")),
            answered=_breakdown(counters, "callsByResponse", "answered"),
            missed=_breakdown(counters, "callsByResult", "missed"),
            duration_seconds=_number(_values(timers, "allCallsDuration")),
        ),
    )


def sms_counters_from_record(record: Dict[str, Any]) -> SmsCounters:
    counters = _mapping(record.get("counters"))
    return SmsCounters(
        total=_number(_values(counters, "allMessages")),
        sent=_breakdown(counters, "messagesByDirection", "outbound"),
        received=_breakdown(counters, "messagesByDirection", "inbound"),
    )


def join_activity(
    call_records: List[Dict[str, Any]], sms_records: List[Dict[str, Any]]
) -> List[UserActivity]:
    sms_by_key = {
        str(record.get("key")): sms_counters_from_record(record)
        for record in _dicts(sms_records, "SMS aggregation")
        if record.get("key") is not None
    }
    rows = []
    for record in _dicts(call_records, "call aggregation"):
        activity = activity_from_call_record(record)
        activity.sms = sms_by_key.get(activity.user_id, SmsCounters())
        rows.append(activity)
    return rows


def summarize_calls(call_records: List[Dict[str, Any]]) -> Dict[str, CallSummaryEntry]:
    summary: Dict[str, CallSummaryEntry] = {}
    for record in _dicts(call_records, "call aggregation"):
        activity = activity_from_call_record(record)
        summary[activity.user_id] = CallSummaryEntry(
            name=activity.user_name, call_count=activity.calls.total
        )
    return summary


def extension_display_name(extension: Dict[str, Any]) -> str:
    contact = _mapping(extension.get("contact"))
    name = f"{contact.get('firstName') or ''} {contact.get('lastName') or ''}".strip()
    return name or f"Extension {extension.get('id')}"


def summarize_sms_logs(
    extensions: List[Dict[str, Any]], fetch_logs: Callable[[str], List[Dict[str, Any]]]
) -> Tuple[Dict[str, SmsSummaryEntry], List[Dict[str, Any]]]:
    summary: Dict[str, SmsSummaryEntry] = {}
    logs: List[Dict[str, Any]] = []
    for extension in _dicts(extensions, "extension"):
        extension_id = str(extension.get("id"))
        name = extension_display_name(extension)
        messages = _dicts(fetch_logs(extension_id), "message")
        inbound = sum(1 for message in messages if message.get("direction") == "Inbound")
        outbound = sum(1 for message in messages if message.get("direction") == "Outbound")
        summary[extension_id] = SmsSummaryEntry(
            name=name, inbound=inbound, outbound=outbound, total=len(messages)
        )
        logs.extend({**message, "extensionId": extension_id, "name": name} for message in messages)
    return summary, logs


def fetch_activity(client: RingCentralClient, period: ResolvedPeriod) -> List[UserActivity]:
    call_records = client.fetch_call_aggregation(period.vendor_from(), period.vendor_to())
    sms_records = client.fetch_sms_aggregation(period.vendor_from(), period.vendor_to())
    logger.info(
        "Fetched %s call rows and %s SMS rows for %s to %s",
        len(call_records),
        len(sms_records),
        period.vendor_from(),
        period.vendor_to(),
    )
    return join_activity(call_records, sms_records)


def fetch_daily_calls(client: RingCentralClient, period: ResolvedPeriod) -> Dict[date, int]:
    counts: Dict[date, int] = {}
    for point in client.fetch_call_timeline(period.vendor_from(), period.vendor_to()):
        moment = point.get("time")
        if not moment:
            continue
        try:
            day = parse_date_input(str(moment), zone=period.zone).astimezone(period.zone).date()
        except ValidationError:
            logger.warning("Skipped timeline point with unreadable time %r.", moment)
            continue
        counts[day] = counts.get(day, 0) + _number(point.get("allCalls"))
    return counts


def fetch_communications(client: RingCentralClient, period: ResolvedPeriod) -> dict:
    extensions = client.list_extensions()
    call_records = client.fetch_call_aggregation(period.vendor_from(), period.vendor_to())
    sms_summary, sms_logs = summarize_sms_logs(
        extensions,
        lambda extension_id: client.list_sms_messages(
            extension_id, period.vendor_from(), period.vendor_to()
        ),
    )
    logger.info(
        "Walked SMS logs for %s extensions: %s messages", len(extensions), len(sms_logs)
    )
    return {
        "call_summary": summarize_calls(call_records),
        "sms_summary": sms_summary,
        "total_sms_messages": len(sms_logs),
        "sms_logs": sms_logs,
    }


def day_range(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
