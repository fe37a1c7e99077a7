import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from callboard.core.database import get_db
from callboard.core.errors import ValidationError
from callboard.schemas import MissedCallOut, SmsMessageOut, WebhookResponse
from callboard.services.webhooks import (
    list_missed_calls,
    list_sms_messages,
    store_missed_call,
    store_sms_message,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["webhooks"])

VALIDATION_TOKEN_HEADER = "Validation-Token"


async def read_json_object(request: Request) -> dict:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError(
            "Request body is not valid JSON", message="Error processing webhook"
        ) from exc
    if not isinstance(payload, dict):
        raise ValidationError(
            "Request body must be a JSON object", message="Error processing webhook"
        )
    return payload


@router.get("/missed_call", response_model=WebhookResponse)
def get_missed_calls(db: Session = Depends(get_db)) -> WebhookResponse:
    records = [MissedCallOut.model_validate(row) for row in list_missed_calls(db)]
    return WebhookResponse(message="Data received successfully via GET", data=records)


@router.post("/missed_call", response_model=WebhookResponse)
async def receive_missed_call(request: Request, db: Session = Depends(get_db)) -> WebhookResponse:
    payload = await read_json_object(request)
    logger.info("Received missed call from RingCentral: %s", payload)
    await run_in_threadpool(store_missed_call, db, payload)
    return WebhookResponse(message="Data received successfully via POST", data=payload)


@router.options("/missed_call")
def missed_call_options() -> Response:
    return Response(status_code=200)


@router.get("/msg_receive", response_model=WebhookResponse)
def get_sms_messages(db: Session = Depends(get_db)) -> WebhookResponse:
    records = [SmsMessageOut.model_validate(row) for row in list_sms_messages(db)]
    return WebhookResponse(message="Data received successfully via GET", data=records)


@router.post("/msg_receive", response_model=WebhookResponse)
async def receive_sms_message(request: Request, db: Session = Depends(get_db)) -> WebhookResponse:
    payload = await read_json_object(request)
    logger.info("Received SMS from RingCentral: %s", payload)
    await run_in_threadpool(store_sms_message, db, payload)
    return WebhookResponse(message="Data received successfully via POST", data=payload)


@router.post("/ringcentral")
async def receive_ringcentral_event(request: Request) -> JSONResponse:
    validation_token = request.headers.get(VALIDATION_TOKEN_HEADER)
    headers = {VALIDATION_TOKEN_HEADER: validation_token} if validation_token else None
    body = await request.body()
    if not body and validation_token:
        logger.info("Answered RingCentral subscription validation request.")
        return JSONResponse(
            content={"success": True, "message": "Subscription validated", "data": None},
            headers=headers,
        )
    payload = await read_json_object(request)
    logger.info("Received event from RingCentral: %s", payload)
    return JSONResponse(
        content={"success": True, "message": "Data received successfully", "data": payload},
        headers=headers,
    )
