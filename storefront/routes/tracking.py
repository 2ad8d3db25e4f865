from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from storefront.database.connection import get_db
from storefront.dependencies.auth import get_optional_user
from storefront.models.user import User
from storefront.schemas.tracking import TrackEventRequest, TrackEventResponse
from storefront.services.tracking_service import track_event


router = APIRouter(prefix="/tracking", tags=["Tracking"])

@router.post("/", response_model=TrackEventResponse, status_code=201)
def track(
    data: TrackEventRequest,
    request: Request,
    x_session_id: Optional[str] = Header(default=None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    geo = getattr(request.state, "geo", None)
    return track_event(
        db,
        data,
        geo=geo,
        session_id=x_session_id,
        user_id=user.id if user else None,
    )
