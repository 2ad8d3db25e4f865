import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from storefront.core.currency import CurrencyTable
from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.enums.catalog import CategoryType, SortOption
from storefront.models.ornament import Ornament
from storefront.schemas.ornament import OrnamentCreate, OrnamentResponse, OrnamentUpdate
from storefront.services.pricing.price_resolver import PricingRates, derive_discount, resolve_ornament

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = (
    "name",
    "description",
    "category",
    "sub_category",
    "type",
    "metal_type",
    "stone_type",
    "style",
    "color",
)

FACET_COLUMNS = ("sub_category", "type", "metal_type", "stone_type", "style", "size", "color")

SORT_ORDERS = {
    SortOption.price_asc: (Ornament.price.asc(),),
    SortOption.price_desc: (Ornament.price.desc(),),
    SortOption.newest: (Ornament.created_at.desc(),),
    SortOption.oldest: (Ornament.created_at.asc(),),
    SortOption.featured: (Ornament.is_featured.desc(), Ornament.created_at.desc()),
}


@dataclass
class OrnamentFilters:
    gender: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    type: Optional[str] = None
    metal_type: Optional[str] = None
    stone_type: Optional[str] = None
    style: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip().lower() for part in value.split(",") if part.strip()]


# --------------------------
# SKU
# --------------------------
def generate_sku(db: Session, category_type: str, gender: str, category: str) -> str:
    """``<CATEGORY_TYPE[:2]>-<GENDER[0]>-<CATEGORY[:3]>-<NNN>``, e.g. ``GO-W-RIN-001``."""
    cat_code = (category_type or "XX")[:2].upper()
    gender_code = (gender or "U")[:1].upper()
    type_code = (category or "GEN")[:3].upper()

    count = (
        db.query(func.count(Ornament.id))
        .filter(Ornament.category == category, Ornament.gender == gender)
        .scalar()
    )
    sequence = count + 1
    while True:
        sku = f"{cat_code}-{gender_code}-{type_code}-{sequence:03d}"
        if not db.query(Ornament.id).filter(Ornament.sku == sku).first():
            return sku
        sequence += 1


def _require_diamond_details(category_type: Any, diamond_details: Any):
    if category_type == CategoryType.diamond.value and not diamond_details:
        raise ValidationError(
            "Diamond products must include 'diamond_details'",
            details={"field": "diamond_details"},
        )


# --------------------------
# CREATE ORNAMENT
# --------------------------
def create_ornament(db: Session, data: OrnamentCreate) -> Ornament:
    values = data.model_dump(mode="json")
    _require_diamond_details(values["category_type"], values.get("diamond_details"))

    if values.get("parent_id") is not None:
        parent = get_ornament(db, values["parent_id"])
        if not parent.design_code:
            # first variant groups the family under the parent's SKU
            parent.design_code = parent.sku
        values["design_code"] = values.get("design_code") or parent.design_code

    values["type"] = values.get("type") or values["category"] or "other"
    price = values["price"]
    values["original_price"] = values.get("original_price") or price
    values["discount"] = derive_discount(price, values["original_price"], values.get("discount"))
    values["sku"] = generate_sku(db, values["category_type"], values["gender"], values["category"])

    ornament = Ornament(**values)
    db.add(ornament)
    db.commit()
    db.refresh(ornament)
    logger.info("Created ornament %s (%s)", ornament.id, ornament.sku)
    return ornament


# --------------------------
# GET ORNAMENT
# --------------------------
def get_ornament(db: Session, ornament_id: int) -> Ornament:
    ornament = db.query(Ornament).filter(Ornament.id == ornament_id).first()
    if not ornament:
        raise NotFoundError("Ornament", ornament_id)
    return ornament


def get_variants(db: Session, ornament: Ornament) -> List[Ornament]:
    return db.query(Ornament).filter(Ornament.parent_id == ornament.id).order_by(Ornament.id).all()


def find_by_design_code(db: Session, design_code: str) -> List[Ornament]:
    return db.query(Ornament).filter(Ornament.design_code == design_code).order_by(Ornament.id).all()


def get_siblings(db: Session, ornament: Ornament) -> List[Ornament]:
    """Other ornaments sharing this one's design code."""
    if not ornament.design_code:
        return []
    return [item for item in find_by_design_code(db, ornament.design_code) if item.id != ornament.id]


# --------------------------
# LIST ORNAMENTS
# --------------------------
def list_ornaments(
    db: Session,
    filters: OrnamentFilters,
    sort: SortOption = SortOption.newest,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Ornament], int]:
    """Top-level ornaments matching ``filters``; returns ``(page_rows, total)``."""
    query = db.query(Ornament).filter(Ornament.parent_id.is_(None))

    if filters.gender:
        query = query.filter(func.lower(Ornament.gender) == filters.gender.strip().lower())

    categories = _split(filters.category)
    if categories:
        query = query.filter(func.lower(Ornament.category).in_(categories))

    # facets match as case-insensitive substrings, any of the comma separated values
    for name in FACET_COLUMNS:
        values = _split(getattr(filters, name))
        if values:
            column = getattr(Ornament, name)
            query = query.filter(or_(*(column.ilike(f"%{value}%") for value in values)))

    if filters.min_price is not None:
        query = query.filter(Ornament.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Ornament.price <= filters.max_price)

    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(or_(*(getattr(Ornament, name).ilike(pattern) for name in SEARCH_COLUMNS)))

    total = query.count()
    rows = (
        query.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS[SortOption.newest]), Ornament.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


# --------------------------
# UPDATE ORNAMENT
# --------------------------
def update_ornament(db: Session, ornament_id: int, data: OrnamentUpdate) -> Ornament:
    if data.sku:
        raise ValidationError("SKU cannot be updated manually", details={"field": "sku"})

    ornament = get_ornament(db, ornament_id)
    values = data.model_dump(mode="json", exclude_unset=True)
    values.pop("sku", None)
    add_image = values.pop("add_image", None)
    remove_image = values.pop("remove_image", None)

    category_type = values.get("category_type") or ornament.category_type
    diamond_details = values["diamond_details"] if "diamond_details" in values else ornament.diamond_details
    _require_diamond_details(category_type, diamond_details)

    for key, value in values.items():
        setattr(ornament, key, value)

    images = list(values.get("images") or ornament.images or [])
    if add_image:
        images.append(add_image)
    if remove_image:
        images = [image for image in images if image != remove_image]
    if add_image or remove_image:
        ornament.images = images

    if not values.get("discount") and ("price" in values or "original_price" in values):
        ornament.discount = derive_discount(ornament.price, ornament.original_price)

    db.commit()
    db.refresh(ornament)
    return ornament


# --------------------------
# DELETE ORNAMENT
# --------------------------
def delete_ornament(db: Session, ornament_id: int) -> None:
    ornament = get_ornament(db, ornament_id)
    db.delete(ornament)
    db.commit()
    logger.info("Deleted ornament %s", ornament_id)


# --------------------------
# PRICED VIEWS
# --------------------------
def _priced(ornament: Ornament, resolution, starting_price: Optional[float] = None) -> Dict[str, Any]:
    data = OrnamentResponse.model_validate(ornament).model_dump()
    data["pricing"] = resolution.as_dict()
    data["starting_price"] = starting_price
    return data


def price_ornament(
    ornament: Ornament,
    variants: Sequence[Ornament],
    currency: Optional[str],
    rates: PricingRates,
    currency_table: CurrencyTable,
) -> Dict[str, Any]:
    """Ornament plus its resolved price, resolved variants and starting price."""
    resolved = resolve_ornament(ornament, variants, currency, rates, currency_table)
    data = _priced(ornament, resolved.main, resolved.starting_price)
    data["variants"] = [
        _priced(variant, resolution, resolution.total_converted_price)
        for variant, resolution in zip(variants, resolved.variants)
    ]
    return data
