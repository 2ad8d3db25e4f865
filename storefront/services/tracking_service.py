import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from storefront.enums.tracking import Platform
from storefront.models.tracking_log import TrackingLog
from storefront.schemas.tracking import TrackEventRequest
from storefront.services.geo import UNKNOWN_COUNTRY, GeoInfo

logger = logging.getLogger(__name__)


def track_event(
    db: Session,
    payload: TrackEventRequest,
    geo: Optional[GeoInfo] = None,
    session_id: Optional[str] = None,
    user_id: Optional[int] = None,
) -> TrackingLog:
    """Store one analytics event.

    Location comes from the request geo first, then from the client's
    metadata (``country``/``region``/``city``). Platform comes from
    ``metadata.platform`` and defaults to web.
    """
    metadata = payload.metadata if isinstance(payload.metadata, dict) else {}
    geo = geo or GeoInfo()

    known_country = geo.country if geo.country and geo.country != UNKNOWN_COUNTRY else None
    platform = metadata.get("platform") or Platform.web.value

    log = TrackingLog(
        event=payload.event.value,
        product_id=payload.product_id,
        order_id=payload.order_id,
        metadata_=metadata,
        session_id=(session_id or "").strip() or None,
        user_id=user_id,
        ip=geo.ip,
        country=known_country or metadata.get("country") or UNKNOWN_COUNTRY,
        region=geo.region or metadata.get("region"),
        city=geo.city or metadata.get("city"),
        platform=str(platform),
        event_timestamp=datetime.utcnow(),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.debug("Tracked %s (session=%s user=%s)", log.event, log.session_id, user_id)
    return log
