import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.core.currency import DEFAULT_CURRENCY_TABLE, HOME_CURRENCY, round_money
from storefront.core.exceptions import ConfigurationError, ValidationError
from storefront.enums.catalog import CategoryType
from storefront.models.ornament import Ornament
from storefront.models.pricing_config import PRICING_CONFIG_ID, PricingConfig
from storefront.schemas.pricing import PricingUpdate
from storefront.services.pricing.price_resolver import PricingRates, resolve_purity_token

logger = logging.getLogger(__name__)


def get_pricing_config(db: Session) -> Optional[PricingConfig]:
    return db.query(PricingConfig).filter(PricingConfig.id == PRICING_CONFIG_ID).first()


def get_rates(db: Session) -> PricingRates:
    """Current rates for the resolver; fails loudly when nothing is configured."""
    config = get_pricing_config(db)
    if config is None:
        raise ConfigurationError("Pricing not configured")
    return PricingRates.from_record(config)


def _upsert_config(db: Session, changes: Dict[str, Any]) -> PricingConfig:
    config = get_pricing_config(db)
    if config is None:
        config = PricingConfig(id=PRICING_CONFIG_ID, gold_prices={}, gemstone_prices={})
        db.add(config)

    for key, value in changes.items():
        setattr(config, key, value)
    return config


def _home_prices(prices: Optional[Dict[str, Any]], amount: float) -> Dict[str, Any]:
    # JSON columns are only flushed when reassigned, so build a new dict
    updated = dict(prices or {})
    entry = dict(updated.get(HOME_CURRENCY) or {})
    entry["amount"] = amount
    entry.setdefault("symbol", DEFAULT_CURRENCY_TABLE.home.symbol)
    updated[HOME_CURRENCY] = entry
    return updated


def _usable_weight(ornament: Ornament) -> Optional[float]:
    try:
        weight = float(ornament.weight)
    except (TypeError, ValueError):
        return None
    return weight if weight > 0 else None


def _recalculated(ornament: Ornament, new_price: float) -> Dict[str, Any]:
    new_price = round_money(new_price)
    return {
        "id": ornament.id,
        "price": new_price,
        "original_price": new_price,
        "prices": _home_prices(ornament.prices, new_price),
    }


def _recalculate_gold(db: Session, gold_prices: Dict[str, float], skipped: List[int]) -> List[Dict[str, Any]]:
    mappings = []
    ornaments = db.query(Ornament).filter(Ornament.category_type == CategoryType.gold.value).all()
    for ornament in ornaments:
        karat = resolve_purity_token(ornament.purity, ornament.metal_type)
        rate = gold_prices.get(karat) if karat else None
        weight = _usable_weight(ornament)
        if not rate or weight is None:
            logger.warning(
                "Skipping recalculation for ornament %s (%s): purity=%s weight=%r",
                ornament.id,
                ornament.name,
                karat or "unknown",
                ornament.weight,
            )
            skipped.append(ornament.id)
            continue
        mappings.append(_recalculated(ornament, weight * float(rate)))
    return mappings


def _recalculate_diamond(db: Session, price_per_carat: float, skipped: List[int]) -> List[Dict[str, Any]]:
    mappings = []
    ornaments = db.query(Ornament).filter(Ornament.category_type == CategoryType.diamond.value).all()
    for ornament in ornaments:
        weight = _usable_weight(ornament)
        if weight is None:
            logger.warning(
                "Skipping recalculation for ornament %s (%s): weight=%r",
                ornament.id,
                ornament.name,
                ornament.weight,
            )
            skipped.append(ornament.id)
            continue
        mappings.append(_recalculated(ornament, weight * price_per_carat))
    return mappings


def update_pricing(db: Session, update: PricingUpdate) -> Dict[str, Any]:
    """Upsert the pricing configuration and recompute stored home prices.

    Gold ornaments are re-priced from ``gold_prices`` by karat, diamond
    ornaments from ``diamond_price_per_carat``. All rows go out in one
    ``bulk_update_mappings`` call and a single commit.

    Returns:
        ``{"pricing": PricingConfig, "updated": int, "skipped": [ids]}``
    """
    changes = update.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("Provide at least one price field")

    config = _upsert_config(db, changes)

    skipped: List[int] = []
    mappings: List[Dict[str, Any]] = []
    if update.gold_prices:
        mappings.extend(_recalculate_gold(db, update.gold_prices, skipped))
    if update.diamond_price_per_carat:
        mappings.extend(_recalculate_diamond(db, float(update.diamond_price_per_carat), skipped))

    if mappings:
        db.bulk_update_mappings(Ornament, mappings)

    db.commit()
    db.refresh(config)

    logger.info(
        "Pricing updated (%s); recalculated %d ornaments, skipped %d",
        ", ".join(sorted(changes)),
        len(mappings),
        len(skipped),
    )
    return {"pricing": config, "updated": len(mappings), "skipped": skipped}
