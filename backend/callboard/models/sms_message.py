from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from callboard.core.database import Base


class SmsMessage(Base):
    __tablename__ = "sms_messages"

    id = Column(Integer, primary_key=True)
    sender_phone = Column(String(64))
    sender_name = Column(String(255))
    recipient_phone = Column(String(64))
    message = Column(Text)
    received_date = Column(String(32))
    received_time = Column(String(32))
    account_id = Column(String(64))
    extension_id = Column(String(64))
    first_name = Column(String(255))
    email = Column(String(255))
    extension_number = Column(String(32))
    raw_payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
