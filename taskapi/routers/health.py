# taskapi/routers/health.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlmodel import Session, text

from taskapi.core.errors import InternalError
from taskapi.db.session import get_session

log = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_app():
    return {
        "success": True,
        "message": "Task Management API is running",
        "data": {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


@router.get("/db")
def health_db(db: Session = Depends(get_session)):
    # Migration is a deployment concern. Runtime only verifies DB connectivity.
    try:
        db.exec(text("SELECT 1"))
    except Exception:
        log.exception("Database health check failed")
        raise InternalError("Database connection failed")
    return {"success": True, "data": {"status": "ok"}}
