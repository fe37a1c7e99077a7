from sqlalchemy import Column, DateTime, Integer, JSON, String
from callboard.core.database import Base


class MissedCall(Base):
    __tablename__ = "missed_calls"

    id = Column(Integer, primary_key=True)
    callid = Column(String(128))
    caller_phone = Column(String(64))
    recipient_phone = Column(String(64))
    recipient_name = Column(String(255))
    call_direction = Column(String(32))
    call_end_date = Column(String(32))
    call_end_time = Column(String(32))
    account_id = Column(String(64))
    extension_id = Column(String(64))
    first_name = Column(String(255))
    email = Column(String(255))
    extension_number = Column(String(32))
    raw_payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
