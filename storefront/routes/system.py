import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.database.connection import get_db
from storefront.schemas.system import HealthCheckResponse
from storefront.services.pricing.pricing_service import get_pricing_config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Lightweight public health check.
    Returns ok + DB connectivity (SELECT 1) + whether pricing is configured.
    """
    now = datetime.utcnow()
    start_time = getattr(request.app.state, "start_time", now)
    uptime_seconds = (now - start_time).total_seconds()

    db_ok = True
    extra = {}
    try:
        db.execute(text("SELECT 1"))
        extra["pricing_configured"] = get_pricing_config(db) is not None
    except SQLAlchemyError as e:
        logger.warning("Health check database error: %s", e)
        db_ok = False
        extra["db_error"] = str(e)

    status = "ok" if db_ok else "degraded"

    return HealthCheckResponse(
        status=status,
        now=now,
        uptime_seconds=uptime_seconds,
        db_ok=db_ok,
        extra=extra or None,
    )
