import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from callboard.core.database import Base
from callboard.core.errors import PersistenceError
from callboard.models import MissedCall, SmsMessage

logger = logging.getLogger(__name__)

MISSED_CALL_FIELDS = (
    "callid",
    "caller_phone",
    "recipient_phone",
    "recipient_name",
    "call_direction",
    "call_end_date",
    "call_end_time",
    "account_id",
    "extension_id",
    "first_name",
    "email",
    "extension_number",
)

SMS_MESSAGE_FIELDS = (
    "sender_phone",
    "sender_name",
    "recipient_phone",
    "message",
    "received_date",
    "received_time",
    "account_id",
    "extension_id",
    "first_name",
    "email",
    "extension_number",
)


def coerce_field(name: str, value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise PersistenceError(f"Cast to string failed for value of field {name!r}")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _store(db: Session, model: Type[Base], fields: tuple, payload: Dict[str, Any]):
    now = datetime.now(timezone.utc)
    values = {field: coerce_field(field, payload.get(field)) for field in fields}
    document = model(**values, raw_payload=payload, created_at=now, updated_at=now)
    try:
        db.add(document)
        db.commit()
        db.refresh(document)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"{type(exc).__name__}: {exc}") from exc
    logger.info("Stored %s %s", model.__tablename__, document.id)
    return document


def _list(db: Session, model: Type[Base]) -> List:
    try:
        return db.query(model).order_by(model.id).all()
    except SQLAlchemyError as exc:
        raise PersistenceError(f"{type(exc).__name__}: {exc}") from exc


def store_missed_call(db: Session, payload: Dict[str, Any]) -> MissedCall:
    return _store(db, MissedCall, MISSED_CALL_FIELDS, payload)


def store_sms_message(db: Session, payload: Dict[str, Any]) -> SmsMessage:
    return _store(db, SmsMessage, SMS_MESSAGE_FIELDS, payload)


def list_missed_calls(db: Session) -> List[MissedCall]:
    return _list(db, MissedCall)


def list_sms_messages(db: Session) -> List[SmsMessage]:
    return _list(db, SmsMessage)
