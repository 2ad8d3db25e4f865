"""
Currency conversion table.

Rates convert an amount in the home currency (INR) into the target currency.
The table is immutable and handed to the price resolver explicitly; routes get
it through the ``get_currency_table`` dependency.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping, Optional

HOME_CURRENCY = "INR"

_CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round a money amount half-up to 2 decimal places."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class CurrencyRate:
    code: str
    rate: float
    symbol: str


@dataclass(frozen=True)
class CurrencyTable:
    """Read-only mapping of currency code -> rate/symbol with a home fallback."""

    rates: Mapping[str, CurrencyRate]
    home_code: str = HOME_CURRENCY

    def __post_init__(self):
        if self.home_code not in self.rates:
            raise ValueError(f"Home currency {self.home_code} missing from table")
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def normalize(self, code: Optional[str]) -> str:
        """Return the upper-cased code, or the home code when it is unknown."""
        candidate = (code or "").strip().upper()
        return candidate if candidate in self.rates else self.home_code

    def get(self, code: Optional[str]) -> CurrencyRate:
        return self.rates[self.normalize(code)]

    @property
    def home(self) -> CurrencyRate:
        return self.rates[self.home_code]


DEFAULT_CURRENCY_TABLE = CurrencyTable(
    rates={
        "INR": CurrencyRate("INR", 1.0, "₹"),
        "USD": CurrencyRate("USD", 0.012, "$"),
        "GBP": CurrencyRate("GBP", 0.0095, "£"),
        "CAD": CurrencyRate("CAD", 0.016, "CA$"),
        "EUR": CurrencyRate("EUR", 0.011, "€"),
        "AED": CurrencyRate("AED", 0.044, "د.إ"),
        "AUD": CurrencyRate("AUD", 0.018, "A$"),
        "SGD": CurrencyRate("SGD", 0.016, "S$"),
        "JPY": CurrencyRate("JPY", 1.8, "¥"),
    },
)


def get_currency_table() -> CurrencyTable:
    return DEFAULT_CURRENCY_TABLE
