from sqlalchemy import Column, Integer, Float, JSON, DateTime
import datetime
from storefront.database.connection import Base

# The pricing configuration is a singleton row.
PRICING_CONFIG_ID = 1


class PricingConfig(Base):
    __tablename__ = "pricing_config"

    id = Column(Integer, primary_key=True, default=PRICING_CONFIG_ID)
    # e.g. {"14K": 4200.0, "18K": 6000.0} -> rate per gram
    gold_prices = Column(JSON, default=dict)
    platinum_price_per_gram = Column(Float, default=0)
    silver925_price_per_gram = Column(Float, default=0)
    diamond_price_per_carat = Column(Float, default=0)
    # e.g. {"Lab-Grown Sapphire": 12000.0} -> rate per carat
    gemstone_prices = Column(JSON, default=dict)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)
