from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import backref, relationship

from storefront.database.connection import Base


class Ornament(Base):
    __tablename__ = "ornaments"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, unique=True, index=True)
    name = Column(String, nullable=False)
    rating = Column(Float, default=0)
    reviews = Column(Integer, default=0)

    # Categorization
    category_type = Column(String, nullable=False, index=True)  # Gold / Diamond / Gemstone / Fashion
    category = Column(String, nullable=False)
    sub_category = Column(String, nullable=True)
    type = Column(String, nullable=False)
    gender = Column(String, nullable=False)

    # Metal block
    metal_type = Column(String, default="")
    purity = Column(String, default="")
    weight = Column(Float, nullable=False, default=0)

    # Home-currency pricing
    price = Column(Float, nullable=False, default=0)
    original_price = Column(Float, default=0)
    discount = Column(Float, default=0)
    making_charges = Column(Float, default=0)

    # e.g. {"USD": {"amount": 1500, "symbol": "$"}}
    prices = Column(JSON, default=dict)
    making_charges_by_country = Column(JSON, default=dict)

    # Stones
    diamond_details = Column(JSON, nullable=True)
    side_diamond_details = Column(JSON, default=list)
    gemstone_details = Column(JSON, default=list)

    stone_type = Column(String, default="")
    style = Column(String, default="")
    size = Column(String, default="")
    color = Column(String, default="")
    description = Column(Text, default="")
    stock = Column(Integer, default=1)
    is_featured = Column(Boolean, default=False)

    # Media
    cover_image = Column(String, nullable=False)
    images = Column(JSON, default=list)
    model_3d = Column(String, nullable=True)
    video_url = Column(String, nullable=True)

    # Variants share a design code and point at their parent
    design_code = Column(String, nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey("ornaments.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    variants = relationship(
        "Ornament",
        backref=backref("parent", remote_side=[id]),
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_ornaments_category_gender_featured", "category", "gender", "is_featured"),
    )
