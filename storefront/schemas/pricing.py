from pydantic import BaseModel, Field, confloat, field_validator
from typing import Dict, List, Optional
from datetime import datetime


class PricingUpdate(BaseModel):
    gold_prices: Optional[Dict[str, confloat(ge=0)]] = None
    platinum_price_per_gram: Optional[float] = Field(default=None, ge=0)
    silver925_price_per_gram: Optional[float] = Field(default=None, ge=0)
    diamond_price_per_carat: Optional[float] = Field(default=None, ge=0)
    gemstone_prices: Optional[Dict[str, confloat(ge=0)]] = None

    @field_validator("gold_prices", mode="before")
    @classmethod
    def normalize_purity(cls, value):
        if value is None:
            return value
        return {str(token).strip().upper(): rate for token, rate in value.items()}


class PricingResponse(BaseModel):
    gold_prices: Dict[str, float] = {}
    platinum_price_per_gram: float = 0
    silver925_price_per_gram: float = 0
    diamond_price_per_carat: float = 0
    gemstone_prices: Dict[str, float] = {}
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecalculationSummary(BaseModel):
    updated: int
    skipped: List[int] = []


class PricingUpdateResponse(BaseModel):
    message: str
    pricing: PricingResponse
    recalculation: RecalculationSummary
