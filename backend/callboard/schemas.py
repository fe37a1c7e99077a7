from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Period(BaseModel):
    from_: str = Field(alias="from")
    to: str

    model_config = ConfigDict(populate_by_name=True)


class CallCounters(CamelModel):
    total: int = 0
    answered: int = 0
    missed: int = 0
    duration_seconds: int = 0


class SmsCounters(CamelModel):
    total: int = 0
    sent: int = 0
    received: int = 0


class UserActivity(CamelModel):
    user_id: str
    user_name: str
    extension_number: Optional[str] = None
    calls: CallCounters = Field(default_factory=CallCounters)
    sms: SmsCounters = Field(default_factory=SmsCounters)


class AnalyticsResponse(CamelModel):
    success: bool = True
    period: Period
    records: List[UserActivity]


class DailyPoint(CamelModel):
    date: str
    label: str
    calls: int


class DailyResponse(CamelModel):
    success: bool = True
    period: Period
    points: List[DailyPoint]


class CallSummaryEntry(CamelModel):
    name: str
    call_count: int


class SmsSummaryEntry(CamelModel):
    name: str
    inbound: int
    outbound: int
    total: int


class CommunicationsResponse(CamelModel):
    success: bool = True
    period: Period
    call_summary: Dict[str, CallSummaryEntry]
    sms_summary: Dict[str, SmsSummaryEntry]
    total_sms_messages: int
    sms_logs: List[Dict[str, Any]]


class ChartPoint(CamelModel):
    name: str
    calls: int


class ReportResponse(CamelModel):
    success: bool = True
    company_name: str
    period: Period
    users: List[UserActivity]
    records: List[UserActivity]
    total_calls: int
    chart: List[ChartPoint]
    daily: List[DailyPoint]


class MissedCallOut(BaseModel):
    id: int
    callid: Optional[str]
    caller_phone: Optional[str]
    recipient_phone: Optional[str]
    recipient_name: Optional[str]
    call_direction: Optional[str]
    call_end_date: Optional[str]
    call_end_time: Optional[str]
    account_id: Optional[str]
    extension_id: Optional[str]
    first_name: Optional[str]
    email: Optional[str]
    extension_number: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SmsMessageOut(BaseModel):
    id: int
    sender_phone: Optional[str]
    sender_name: Optional[str]
    recipient_phone: Optional[str]
    message: Optional[str]
    received_date: Optional[str]
    received_time: Optional[str]
    account_id: Optional[str]
    extension_id: Optional[str]
    first_name: Optional[str]
    email: Optional[str]
    extension_number: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WebhookResponse(BaseModel):
    success: bool = True
    message: str
    data: Any = None


class QuickRangesResponse(CamelModel):
    success: bool = True
    time_zone: str
    today: str
    ranges: Dict[str, Period]
