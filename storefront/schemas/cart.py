from pydantic import BaseModel, Field
from typing import List, Optional


class GuestCartAddRequest(BaseModel):
    guest_id: Optional[str] = None
    ornament_id: int
    quantity: int = Field(default=1, ge=1)


class CartAddRequest(BaseModel):
    ornament_id: int
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(BaseModel):
    ornament_id: int
    quantity: int = Field(ge=1)


class CartOrnament(BaseModel):
    id: int
    sku: Optional[str] = None
    name: str
    price: float
    cover_image: str

    class Config:
        from_attributes = True


class CartItemResponse(BaseModel):
    ornament_id: int
    quantity: int
    ornament: Optional[CartOrnament] = None

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    id: Optional[int] = None
    guest_id: Optional[str] = None
    user_id: Optional[int] = None
    items: List[CartItemResponse] = []

    class Config:
        from_attributes = True


class GuestCartResponse(BaseModel):
    guest_id: str
    message: Optional[str] = None
    cart: CartResponse
