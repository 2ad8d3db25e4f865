from pydantic import BaseModel, EmailStr
from typing import List, Optional


class ProductQueryRequest(BaseModel):
    name: Optional[str] = None
    email: EmailStr
    size: Optional[str] = None
    message: Optional[str] = None
    product_id: str
    product_name: str
    product_url: Optional[str] = None


class CustomRequest(BaseModel):
    name: str
    email: EmailStr
    phone: str
    inspiration: Optional[str] = None
    special_requests: Optional[str] = None
    # data URLs: "data:image/png;base64,...."
    images: List[str] = []


class FranchiseInquiry(BaseModel):
    full_name: str
    email: EmailStr
    phone: str
    location: Optional[str] = None
    investment: Optional[str] = None
    experience: Optional[str] = None
    message: Optional[str] = None
