from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from storefront.enums.catalog import CategoryType, Gender


class MoneyAmount(BaseModel):
    amount: float
    symbol: Optional[str] = None


class DiamondDetail(BaseModel):
    carat: float = 0
    count: int = 1
    price_per_carat: Optional[float] = None
    shape: Optional[str] = None
    clarity: Optional[str] = None
    color: Optional[str] = None


class GemstoneDetail(BaseModel):
    stone_type: str
    carat: float = 0
    count: int = 1


def _upper_keys(value: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {str(code).strip().upper(): entry for code, entry in (value or {}).items()}


class OrnamentBase(BaseModel):
    name: str
    category_type: CategoryType
    category: str
    sub_category: Optional[str] = None
    type: Optional[str] = None
    gender: Gender

    metal_type: str = ""
    purity: str = ""
    weight: float = Field(ge=0)

    price: float = Field(default=0, ge=0)
    original_price: Optional[float] = None
    discount: Optional[float] = None
    making_charges: float = 0
    prices: Dict[str, MoneyAmount] = {}
    making_charges_by_country: Dict[str, MoneyAmount] = {}

    diamond_details: Optional[DiamondDetail] = None
    side_diamond_details: List[DiamondDetail] = []
    gemstone_details: List[GemstoneDetail] = []

    stone_type: str = ""
    style: str = ""
    size: str = ""
    color: str = ""
    description: str = ""
    stock: int = 1
    is_featured: bool = False
    rating: float = 0
    reviews: int = 0

    cover_image: str
    images: List[str] = []
    model_3d: Optional[str] = None
    video_url: Optional[str] = None

    design_code: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator("prices", "making_charges_by_country", mode="before")
    @classmethod
    def normalize_codes(cls, value):
        return _upper_keys(value)

    class Config:
        protected_namespaces = ()


class OrnamentCreate(OrnamentBase):
    pass


class OrnamentUpdate(BaseModel):
    name: Optional[str] = None
    category_type: Optional[CategoryType] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    type: Optional[str] = None
    gender: Optional[Gender] = None
    sku: Optional[str] = None

    metal_type: Optional[str] = None
    purity: Optional[str] = None
    weight: Optional[float] = Field(default=None, ge=0)

    price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = None
    discount: Optional[float] = None
    making_charges: Optional[float] = None
    prices: Optional[Dict[str, MoneyAmount]] = None
    making_charges_by_country: Optional[Dict[str, MoneyAmount]] = None

    diamond_details: Optional[DiamondDetail] = None
    side_diamond_details: Optional[List[DiamondDetail]] = None
    gemstone_details: Optional[List[GemstoneDetail]] = None

    stone_type: Optional[str] = None
    style: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    stock: Optional[int] = None
    is_featured: Optional[bool] = None

    cover_image: Optional[str] = None
    images: Optional[List[str]] = None
    add_image: Optional[str] = None
    remove_image: Optional[str] = None
    model_3d: Optional[str] = None
    video_url: Optional[str] = None

    design_code: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator("prices", "making_charges_by_country", mode="before")
    @classmethod
    def normalize_codes(cls, value):
        if value is None:
            return value
        return _upper_keys(value)

    class Config:
        protected_namespaces = ()


class OrnamentResponse(BaseModel):
    id: int
    sku: Optional[str] = None
    name: str
    category_type: str
    category: str
    sub_category: Optional[str] = None
    type: str
    gender: str

    metal_type: Optional[str] = ""
    purity: Optional[str] = ""
    weight: float

    price: float
    original_price: Optional[float] = None
    discount: Optional[float] = None
    making_charges: Optional[float] = 0
    prices: Optional[Dict[str, Any]] = None
    making_charges_by_country: Optional[Dict[str, Any]] = None

    diamond_details: Optional[Dict[str, Any]] = None
    side_diamond_details: Optional[List[Dict[str, Any]]] = None
    gemstone_details: Optional[List[Dict[str, Any]]] = None

    stone_type: Optional[str] = ""
    style: Optional[str] = ""
    size: Optional[str] = ""
    color: Optional[str] = ""
    description: Optional[str] = ""
    stock: Optional[int] = 0
    is_featured: Optional[bool] = False
    rating: Optional[float] = 0
    reviews: Optional[int] = 0

    cover_image: str
    images: Optional[List[str]] = None
    model_3d: Optional[str] = None
    video_url: Optional[str] = None

    design_code: Optional[str] = None
    parent_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        protected_namespaces = ()


class ResolvedPrice(BaseModel):
    currency: str
    currency_symbol: str
    base_price: float
    display_price: float
    converted_making_charge: float
    total_converted_price: float
    discount: float
    price_overridden: bool = False
    making_charge_overridden: bool = False


class PricedOrnament(OrnamentResponse):
    pricing: ResolvedPrice
    starting_price: Optional[float] = None


class OrnamentDetailResponse(PricedOrnament):
    variants: List[PricedOrnament] = []


class OrnamentListResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    count: int
    currency: str
    ornaments: List[PricedOrnament]
