"""
Ornament price resolution.

Pure functions: nothing here touches the database. Callers hand in an ornament
(ORM row or mapping), the pricing configuration and the currency table, and get
back a ``PriceResolution``.

Resolution order for a target currency:

1. metal total      = rate per gram (purity table, or platinum/silver rate) x weight
2. diamond total    = carat x count x price per carat (main + side diamonds)
3. gemstone total   = carat x count x rate for the stone type
4. base total       = metal + diamond + gemstone (home currency)
5. display price    = prices[currency].amount if set, else base total x rate
6. making charge    = making_charges_by_country[currency].amount if set,
                      else making_charges x rate
7. total            = display price + making charge (2 decimals)
8. discount         = stored discount, else derived from original_price/price
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from storefront.core.currency import CurrencyTable, round_money
from storefront.core.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

_PURITY_PATTERN = re.compile(r"(\d+)\s*K", re.IGNORECASE)


def extract_purity_token(text: Optional[str]) -> Optional[str]:
    """Pull a karat token such as ``"18K"`` out of free text.

    >>> extract_purity_token("18K White Gold")
    '18K'
    >>> extract_purity_token("Platinum") is None
    True
    """
    if not text:
        return None
    match = _PURITY_PATTERN.search(str(text))
    if not match:
        return None
    return f"{int(match.group(1))}K"


def resolve_purity_token(purity: Optional[str], metal_type: Optional[str]) -> Optional[str]:
    """Explicit purity wins; otherwise fall back to the metal type text."""
    return extract_purity_token(purity) or extract_purity_token(metal_type)


# ===================== INPUT RECORDS =====================


def _field(record: Any, name: str, default: Any = None) -> Any:
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def _pick(raw: Mapping, *names: str) -> Any:
    for name in names:
        if raw.get(name) is not None:
            return raw[name]
    return None


def _to_float(value: Any, name: str, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Field '{name}' must be numeric",
            details={"field": name, "value": str(value)},
        )


@dataclass
class MetalSpec:
    metal_type: str = ""
    purity: str = ""
    weight: float = 0.0

    @property
    def purity_token(self) -> Optional[str]:
        return resolve_purity_token(self.purity, self.metal_type)


@dataclass
class StoneLine:
    carat: float = 0.0
    count: int = 1
    price_per_carat: Optional[float] = None
    stone_type: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping) -> "StoneLine":
        price_per_carat = _pick(raw, "price_per_carat", "pricePerCarat")
        count = _pick(raw, "count")
        return cls(
            carat=_to_float(_pick(raw, "carat"), "carat"),
            count=int(_to_float(count, "count", 1.0)),
            price_per_carat=(
                _to_float(price_per_carat, "price_per_carat")
                if price_per_carat is not None
                else None
            ),
            stone_type=str(_pick(raw, "stone_type", "stoneType") or ""),
        )


@dataclass
class MoneyOverride:
    amount: float
    symbol: Optional[str] = None


def _stone_lines(raw: Any) -> List[StoneLine]:
    if not raw:
        return []
    if isinstance(raw, Mapping):
        raw = [raw]
    return [StoneLine.from_mapping(entry) for entry in raw if isinstance(entry, Mapping)]


def _overrides(raw: Any, name: str) -> Dict[str, MoneyOverride]:
    """Parse ``{code: {amount, symbol}}``; entries without an amount are ignored."""
    if not raw or not isinstance(raw, Mapping):
        return {}
    parsed: Dict[str, MoneyOverride] = {}
    for code, entry in raw.items():
        if isinstance(entry, Mapping):
            amount, symbol = entry.get("amount"), entry.get("symbol")
        else:
            amount, symbol = entry, None
        if amount is None or amount == "":
            continue
        parsed[str(code).strip().upper()] = MoneyOverride(
            amount=_to_float(amount, f"{name}.{code}.amount"),
            symbol=symbol or None,
        )
    return parsed


@dataclass
class PricingItem:
    """Everything the resolver needs from an ornament or variant, with defaults."""

    id: Optional[int] = None
    metal: MetalSpec = field(default_factory=MetalSpec)
    diamond: Optional[StoneLine] = None
    side_diamonds: List[StoneLine] = field(default_factory=list)
    gemstones: List[StoneLine] = field(default_factory=list)
    making_charges: float = 0.0
    prices: Dict[str, MoneyOverride] = field(default_factory=dict)
    making_charges_by_country: Dict[str, MoneyOverride] = field(default_factory=dict)
    price: float = 0.0
    original_price: Optional[float] = None
    discount: Optional[float] = None

    @classmethod
    def from_record(cls, record: Any) -> "PricingItem":
        """Build from an ORM row or a plain mapping (the validation boundary)."""
        diamond_raw = _field(record, "diamond_details")
        original_price = _field(record, "original_price")
        discount = _field(record, "discount")
        return cls(
            id=_field(record, "id"),
            metal=MetalSpec(
                metal_type=str(_field(record, "metal_type", "")),
                purity=str(_field(record, "purity", "")),
                weight=_to_float(_field(record, "weight"), "weight"),
            ),
            diamond=StoneLine.from_mapping(diamond_raw) if isinstance(diamond_raw, Mapping) and diamond_raw else None,
            side_diamonds=_stone_lines(_field(record, "side_diamond_details")),
            gemstones=_stone_lines(_field(record, "gemstone_details")),
            making_charges=_to_float(_field(record, "making_charges"), "making_charges"),
            prices=_overrides(_field(record, "prices"), "prices"),
            making_charges_by_country=_overrides(
                _field(record, "making_charges_by_country"), "making_charges_by_country"
            ),
            price=_to_float(_field(record, "price"), "price"),
            original_price=(
                _to_float(original_price, "original_price") if original_price is not None else None
            ),
            discount=_to_float(discount, "discount") if discount is not None else None,
        )


@dataclass
class PricingRates:
    """Read-only view of the pricing configuration."""

    gold_prices: Dict[str, float] = field(default_factory=dict)
    platinum_price_per_gram: float = 0.0
    silver925_price_per_gram: float = 0.0
    diamond_price_per_carat: float = 0.0
    gemstone_prices: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_record(cls, config: Any) -> "PricingRates":
        gold = _field(config, "gold_prices", {}) or {}
        gemstones = _field(config, "gemstone_prices", {}) or {}
        return cls(
            gold_prices={
                str(token).strip().upper(): _to_float(rate, f"gold_prices.{token}")
                for token, rate in gold.items()
            },
            platinum_price_per_gram=_to_float(
                _field(config, "platinum_price_per_gram"), "platinum_price_per_gram"
            ),
            silver925_price_per_gram=_to_float(
                _field(config, "silver925_price_per_gram"), "silver925_price_per_gram"
            ),
            diamond_price_per_carat=_to_float(
                _field(config, "diamond_price_per_carat"), "diamond_price_per_carat"
            ),
            gemstone_prices={
                str(stone).strip().lower(): _to_float(rate, f"gemstone_prices.{stone}")
                for stone, rate in gemstones.items()
            },
        )

    def gold_rate(self, token: Optional[str]) -> Optional[float]:
        if not token:
            return None
        return self.gold_prices.get(token.upper())

    def gemstone_rate(self, stone_type: Optional[str]) -> float:
        return self.gemstone_prices.get((stone_type or "").strip().lower(), 0.0)


# ===================== OUTPUT =====================


@dataclass
class PriceBreakdown:
    metal_total: float = 0.0
    diamond_total: float = 0.0
    gemstone_total: float = 0.0

    @property
    def base_total(self) -> float:
        return self.metal_total + self.diamond_total + self.gemstone_total


@dataclass
class PriceResolution:
    item_id: Optional[int]
    currency: str
    currency_symbol: str
    base_price: float
    display_price: float
    converted_making_charge: float
    total_converted_price: float
    discount: float
    price_overridden: bool = False
    making_charge_overridden: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OrnamentPricing:
    """A main ornament and its variants, each resolved independently."""

    main: PriceResolution
    variants: List[PriceResolution]
    starting_price: float


# ===================== COMPONENT TOTALS =====================


def _rate_per_gram(metal: MetalSpec, rates: PricingRates) -> Optional[float]:
    lowered = metal.metal_type.lower()
    if "platinum" in lowered:
        return rates.platinum_price_per_gram
    if "silver" in lowered:
        return rates.silver925_price_per_gram
    return rates.gold_rate(metal.purity_token)


def compute_metal_total(metal: MetalSpec, rates: PricingRates) -> float:
    if not metal.weight or metal.weight <= 0:
        return 0.0
    rate = _rate_per_gram(metal, rates)
    if not rate:
        logger.warning(
            "No metal rate for metal_type=%r purity=%r; metal total is 0",
            metal.metal_type,
            metal.purity,
        )
        return 0.0
    return rate * metal.weight


def _stone_value(line: StoneLine, price_per_carat: float) -> float:
    return line.carat * line.count * price_per_carat


def compute_diamond_total(
    diamond: Optional[StoneLine],
    side_diamonds: Sequence[StoneLine],
    rates: PricingRates,
) -> float:
    total = 0.0
    for line in ([diamond] if diamond else []) + list(side_diamonds):
        price_per_carat = (
            line.price_per_carat
            if line.price_per_carat is not None
            else rates.diamond_price_per_carat
        )
        total += _stone_value(line, price_per_carat)
    return total


def compute_gemstone_total(gemstones: Sequence[StoneLine], rates: PricingRates) -> float:
    return sum(_stone_value(line, rates.gemstone_rate(line.stone_type)) for line in gemstones)


def compute_breakdown(item: PricingItem, rates: PricingRates) -> PriceBreakdown:
    return PriceBreakdown(
        metal_total=compute_metal_total(item.metal, rates),
        diamond_total=compute_diamond_total(item.diamond, item.side_diamonds, rates),
        gemstone_total=compute_gemstone_total(item.gemstones, rates),
    )


def derive_discount(
    price: float,
    original_price: Optional[float],
    stored_discount: Optional[float] = None,
) -> float:
    """Stored discount if non-zero, else whole-percent drop from original_price."""
    if stored_discount:
        return max(float(stored_discount), 0.0)

    original = original_price or price
    if not original or original <= 0:
        return 0.0

    percent = Decimal(str((original - price) / original * 100))
    rounded = float(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(rounded, 0.0)


# ===================== RESOLVER =====================


def _as_rates(pricing_config: Any) -> PricingRates:
    if pricing_config is None:
        raise ConfigurationError("Pricing not configured")
    if isinstance(pricing_config, PricingRates):
        return pricing_config
    return PricingRates.from_record(pricing_config)


def _as_item(item: Any) -> PricingItem:
    return item if isinstance(item, PricingItem) else PricingItem.from_record(item)


def resolve_price(
    item: Any,
    target_currency: Optional[str],
    pricing_config: Any,
    currency_table: CurrencyTable,
) -> PriceResolution:
    """Resolve display price, making charge and total for one currency.

    Raises:
        ConfigurationError: ``pricing_config`` is None.
    """
    rates = _as_rates(pricing_config)
    item = _as_item(item)

    code = currency_table.normalize(target_currency)
    currency = currency_table.get(code)

    base_total = compute_breakdown(item, rates).base_total

    price_override = item.prices.get(code)
    if price_override is not None:
        display_price = round_money(price_override.amount)
        symbol = price_override.symbol or currency.symbol
    else:
        display_price = round_money(base_total * currency.rate)
        symbol = currency.symbol

    making_override = item.making_charges_by_country.get(code)
    if making_override is not None:
        making_charge = round_money(making_override.amount)
    else:
        making_charge = round_money(item.making_charges * currency.rate)

    return PriceResolution(
        item_id=item.id,
        currency=code,
        currency_symbol=symbol,
        base_price=round_money(base_total),
        display_price=display_price,
        converted_making_charge=making_charge,
        total_converted_price=round_money(display_price + making_charge),
        discount=derive_discount(item.price, item.original_price, item.discount),
        price_overridden=price_override is not None,
        making_charge_overridden=making_override is not None,
    )


def cheapest_total(resolutions: Sequence[PriceResolution]) -> Optional[float]:
    if not resolutions:
        return None
    return min(resolution.total_converted_price for resolution in resolutions)


def resolve_ornament(
    item: Any,
    variants: Sequence[Any],
    target_currency: Optional[str],
    pricing_config: Any,
    currency_table: CurrencyTable,
) -> OrnamentPricing:
    """Resolve a main ornament and each variant; starting price is the cheapest variant."""
    rates = _as_rates(pricing_config)
    main = resolve_price(item, target_currency, rates, currency_table)
    resolved_variants = [
        resolve_price(variant, target_currency, rates, currency_table) for variant in variants
    ]
    cheapest = cheapest_total(resolved_variants)
    return OrnamentPricing(
        main=main,
        variants=resolved_variants,
        starting_price=cheapest if cheapest is not None else main.total_converted_price,
    )
