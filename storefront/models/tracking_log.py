from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String

from storefront.database.connection import Base


class TrackingLog(Base):
    __tablename__ = "tracking_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    session_id = Column(String, index=True, nullable=True)

    event = Column(String, nullable=False, index=True)
    product_id = Column(Integer, nullable=True)
    order_id = Column(String, nullable=True)
    # e.g. {"platform": "web", "referrer": "instagram"}
    metadata_ = Column("metadata", JSON, default=dict)

    event_timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    ip = Column(String, nullable=True)
    country = Column(String, index=True)
    region = Column(String, nullable=True)
    city = Column(String, nullable=True)
    platform = Column(String, default="web")

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_tracking_logs_timestamp_event", "event_timestamp", "event"),
        Index("ix_tracking_logs_country_event", "country", "event"),
        Index("ix_tracking_logs_user_event", "user_id", "event"),
    )
