from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from callboard.core.database import SessionLocal
from callboard.core.errors import PersistenceError

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
def ready():
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise PersistenceError(str(exc), message="Database unavailable") from exc
    finally:
        db.close()
    return {"status": "ready"}
