from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

from storefront.enums.tracking import TrackingEvent


class TrackEventRequest(BaseModel):
    event: TrackingEvent
    product_id: Optional[int] = None
    order_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class TrackEventResponse(BaseModel):
    id: int
    event: str
    session_id: Optional[str] = None
    user_id: Optional[int] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    platform: str
    event_timestamp: datetime

    class Config:
        from_attributes = True
