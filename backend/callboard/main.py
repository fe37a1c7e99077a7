import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from callboard import models  # noqa: F401
from callboard.api import analytics, health, reports, webhooks
from callboard.core.config import settings
from callboard.core.cors import OriginPolicy, OriginPolicyMiddleware
from callboard.core.database import Base, engine
from callboard.core.errors import (
    CallboardError,
    callboard_error_handler,
    unhandled_error_handler,
)
from callboard.services.ringcentral_client import RingCentralClient

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(ringcentral: Optional[RingCentralClient] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name)
    app.state.ringcentral = ringcentral or RingCentralClient.from_settings(settings)

    @app.on_event("startup")
    def on_startup() -> None:
        Base.metadata.create_all(bind=engine)
        missing = settings.missing_ringcentral_settings()
        if missing:
            logger.warning(
                "RingCentral settings missing (%s); analytics requests will fail.",
                ", ".join(missing),
            )

    app.add_middleware(OriginPolicyMiddleware, policy=OriginPolicy.from_settings(settings))
    app.add_exception_handler(CallboardError, callboard_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(health.router)
    app.include_router(analytics.router)
    app.include_router(reports.router)
    app.include_router(webhooks.router)
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
    return app


app = create_app()
