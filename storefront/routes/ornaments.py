import math
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from storefront.core.currency import CurrencyTable, get_currency_table
from storefront.database.connection import get_db
from storefront.dependencies.auth import require_admin
from storefront.enums.catalog import SortOption
from storefront.schemas.ornament import (
    OrnamentCreate,
    OrnamentDetailResponse,
    OrnamentListResponse,
    OrnamentResponse,
    OrnamentUpdate,
    PricedOrnament,
)
from storefront.services.ornament_service import (
    OrnamentFilters,
    create_ornament,
    delete_ornament,
    get_ornament,
    get_siblings,
    get_variants,
    list_ornaments,
    price_ornament,
    update_ornament,
)
from storefront.services.pricing.pricing_service import get_rates


router = APIRouter(prefix="/ornaments", tags=["Ornaments"])

# LIST
@router.get("/", response_model=OrnamentListResponse)
def list_all(
    currency: str = "INR",
    gender: Optional[str] = None,
    category: Optional[str] = None,
    sub_category: Optional[str] = None,
    type: Optional[str] = None,
    metal_type: Optional[str] = None,
    stone_type: Optional[str] = None,
    style: Optional[str] = None,
    size: Optional[str] = None,
    color: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    sort: SortOption = SortOption.newest,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    currency_table: CurrencyTable = Depends(get_currency_table),
):
    rates = get_rates(db)
    filters = OrnamentFilters(
        gender=gender,
        category=category,
        sub_category=sub_category,
        type=type,
        metal_type=metal_type,
        stone_type=stone_type,
        style=style,
        size=size,
        color=color,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    rows, total = list_ornaments(db, filters, sort=sort, page=page, limit=limit)
    ornaments = []
    for ornament in rows:
        priced = price_ornament(ornament, get_variants(db, ornament), currency, rates, currency_table)
        priced.pop("variants")
        ornaments.append(priced)

    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
        "count": len(ornaments),
        "currency": currency_table.normalize(currency),
        "ornaments": ornaments,
    }

# GET BY ID
@router.get("/{ornament_id}", response_model=OrnamentDetailResponse)
def get(
    ornament_id: int,
    currency: str = "INR",
    db: Session = Depends(get_db),
    currency_table: CurrencyTable = Depends(get_currency_table),
):
    ornament = get_ornament(db, ornament_id)
    return price_ornament(ornament, get_variants(db, ornament), currency, get_rates(db), currency_table)

# DESIGN-CODE SIBLINGS
@router.get("/{ornament_id}/siblings", response_model=list[PricedOrnament])
def siblings(
    ornament_id: int,
    currency: str = "INR",
    db: Session = Depends(get_db),
    currency_table: CurrencyTable = Depends(get_currency_table),
):
    ornament = get_ornament(db, ornament_id)
    rates = get_rates(db)
    results = []
    for sibling in get_siblings(db, ornament):
        priced = price_ornament(sibling, [], currency, rates, currency_table)
        priced.pop("variants")
        results.append(priced)
    return results

# CREATE
@router.post("/", response_model=OrnamentResponse, status_code=201, dependencies=[Depends(require_admin)])
def create(data: OrnamentCreate, db: Session = Depends(get_db)):
    return create_ornament(db, data)

# UPDATE
@router.put("/{ornament_id}", response_model=OrnamentResponse, dependencies=[Depends(require_admin)])
def update(ornament_id: int, data: OrnamentUpdate, db: Session = Depends(get_db)):
    return update_ornament(db, ornament_id, data)

# DELETE
@router.delete("/{ornament_id}", dependencies=[Depends(require_admin)])
def delete(ornament_id: int, db: Session = Depends(get_db)):
    delete_ornament(db, ornament_id)
    return {"message": "Ornament deleted"}
