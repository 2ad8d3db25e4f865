import logging

import pytest

from storefront.core.currency import DEFAULT_CURRENCY_TABLE, CurrencyRate, CurrencyTable
from storefront.core.exceptions import ConfigurationError, ValidationError
from storefront.services.pricing.price_resolver import (
    PricingItem,
    derive_discount,
    extract_purity_token,
    resolve_ornament,
    resolve_price,
    resolve_purity_token,
)

RATES = {
    "gold_prices": {"14K": 4200, "18k": 6000},
    "platinum_price_per_gram": 3500,
    "silver925_price_per_gram": 90,
    "diamond_price_per_carat": 40000,
    "gemstone_prices": {"Ruby": 15000},
}


def _ring(**overrides):
    item = {
        "id": 1,
        "metal_type": "18K Yellow Gold",
        "purity": "18K",
        "weight": 5,
        "diamond_details": {"carat": 1, "count": 2, "price_per_carat": 40000},
        "price": 110000,
        "original_price": 110000,
    }
    item.update(overrides)
    return item


# --------------------------
# purity token
# --------------------------
@pytest.mark.parametrize(
    "text, expected",
    [
        ("18K", "18K"),
        ("18k rose gold", "18K"),
        ("22 K Yellow Gold", "22K"),
        ("Platinum", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_purity_token(text, expected):
    assert extract_purity_token(text) == expected


def test_purity_falls_back_to_metal_type():
    assert resolve_purity_token("", "14K White Gold") == "14K"
    assert resolve_purity_token("18K", "14K White Gold") == "18K"
    assert resolve_purity_token(None, "Sterling Silver") is None


# --------------------------
# core scenarios
# --------------------------
def test_computed_usd_price_without_override():
    result = resolve_price(_ring(), "USD", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.base_price == pytest.approx(110000.0)
    assert result.display_price == pytest.approx(1320.00)
    assert result.currency == "USD"
    assert result.currency_symbol == "$"
    assert result.price_overridden is False
    assert result.total_converted_price == pytest.approx(1320.00)


def test_manual_override_wins_over_computed_price():
    item = _ring(prices={"USD": {"amount": 1500, "symbol": "US$"}})
    result = resolve_price(item, "usd", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.display_price == pytest.approx(1500.00)
    assert result.currency_symbol == "US$"
    assert result.price_overridden is True
    # base total is still reported
    assert result.base_price == pytest.approx(110000.0)


def test_override_without_symbol_uses_table_symbol():
    item = _ring(prices={"GBP": {"amount": 999}})
    result = resolve_price(item, "GBP", RATES, DEFAULT_CURRENCY_TABLE)
    assert result.display_price == pytest.approx(999.0)
    assert result.currency_symbol == "£"


def test_missing_configuration_raises():
    with pytest.raises(ConfigurationError) as exc:
        resolve_price(_ring(), "USD", None, DEFAULT_CURRENCY_TABLE)
    assert exc.value.message == "Pricing not configured"


def test_unknown_currency_falls_back_to_home_with_home_override():
    item = _ring(prices={"INR": {"amount": 125000, "symbol": "₹"}})
    result = resolve_price(item, "XYZ", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.currency == "INR"
    assert result.display_price == pytest.approx(125000.0)
    assert result.price_overridden is True


def test_none_currency_is_home_currency():
    result = resolve_price(_ring(), None, RATES, DEFAULT_CURRENCY_TABLE)
    assert result.currency == "INR"
    assert result.display_price == pytest.approx(110000.0)


# --------------------------
# making charges
# --------------------------
def test_making_charge_converted_and_added_to_total():
    item = _ring(making_charges=5000)
    result = resolve_price(item, "USD", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.converted_making_charge == pytest.approx(60.0)
    assert result.total_converted_price == pytest.approx(1380.0)
    assert result.total_converted_price == pytest.approx(
        result.display_price + result.converted_making_charge
    )


def test_country_making_charge_override():
    item = _ring(making_charges=5000, making_charges_by_country={"usd": {"amount": 45.5}})
    result = resolve_price(item, "USD", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.converted_making_charge == pytest.approx(45.5)
    assert result.making_charge_overridden is True
    assert result.total_converted_price == pytest.approx(1365.5)


def test_override_entries_without_amount_are_ignored():
    item = _ring(prices={"USD": {"symbol": "$"}})
    result = resolve_price(item, "USD", RATES, DEFAULT_CURRENCY_TABLE)
    assert result.price_overridden is False
    assert result.display_price == pytest.approx(1320.0)


# --------------------------
# metal / stone components
# --------------------------
def test_platinum_and_silver_use_dedicated_rates():
    platinum = {"metal_type": "Platinum 950", "weight": 2}
    silver = {"metal_type": "Sterling Silver", "purity": "925", "weight": 10}

    assert resolve_price(platinum, "INR", RATES, DEFAULT_CURRENCY_TABLE).base_price == pytest.approx(7000.0)
    assert resolve_price(silver, "INR", RATES, DEFAULT_CURRENCY_TABLE).base_price == pytest.approx(900.0)


def test_missing_gold_rate_contributes_zero_and_warns(caplog):
    item = {"metal_type": "24K Gold", "purity": "24K", "weight": 3}
    with caplog.at_level(logging.WARNING):
        result = resolve_price(item, "INR", RATES, DEFAULT_CURRENCY_TABLE)

    assert result.base_price == 0
    assert "No metal rate" in caplog.text


def test_zero_weight_metal_total_is_zero():
    item = {"metal_type": "18K Gold", "purity": "18K", "weight": 0}
    assert resolve_price(item, "INR", RATES, DEFAULT_CURRENCY_TABLE).base_price == 0


def test_diamond_defaults_to_global_rate_and_count_one():
    item = {
        "diamond_details": {"carat": 0.5},
        "side_diamond_details": [{"carat": 0.1, "count": 10}],
    }
    result = resolve_price(item, "INR", RATES, DEFAULT_CURRENCY_TABLE)
    # 0.5 x 40000 + 0.1 x 10 x 40000
    assert result.base_price == pytest.approx(60000.0)


def test_gemstones_priced_case_insensitively_and_unknown_is_zero():
    item = {
        "gemstone_details": [
            {"stone_type": "ruby", "carat": 0.5, "count": 2},
            {"stone_type": "Opal", "carat": 3},
        ]
    }
    result = resolve_price(item, "INR", RATES, DEFAULT_CURRENCY_TABLE)
    assert result.base_price == pytest.approx(15000.0)


def test_non_numeric_weight_is_rejected():
    with pytest.raises(ValidationError):
        PricingItem.from_record({"weight": "heavy"})


def test_custom_currency_table_is_honoured():
    table = CurrencyTable(
        rates={
            "INR": CurrencyRate("INR", 1.0, "₹"),
            "USD": CurrencyRate("USD", 0.01, "$"),
        }
    )
    result = resolve_price(_ring(), "USD", RATES, table)
    assert result.display_price == pytest.approx(1100.0)


def test_currency_table_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_CURRENCY_TABLE.rates["USD"] = CurrencyRate("USD", 1.0, "$")


# --------------------------
# discount
# --------------------------
def test_discount_derived_from_original_price():
    assert derive_discount(80, 100) == 20
    assert derive_discount(100, 300) == 67
    assert derive_discount(100, 150) == 33


def test_discount_guards():
    assert derive_discount(100, 0) == 0
    assert derive_discount(0, 0) == 0
    assert derive_discount(120, 100) == 0
    assert derive_discount(100, None) == 0


def test_stored_discount_wins():
    assert derive_discount(80, 100, stored_discount=15) == 15
    assert derive_discount(80, 100, stored_discount=0) == 20


# --------------------------
# variants
# --------------------------
def test_starting_price_is_cheapest_variant():
    main = {"id": 1, "prices": {"INR": {"amount": 150}}}
    variants = [
        {"id": 2, "prices": {"INR": {"amount": 100}}},
        {"id": 3, "prices": {"INR": {"amount": 85}}},
        {"id": 4, "prices": {"INR": {"amount": 120}}},
    ]
    priced = resolve_ornament(main, variants, "INR", RATES, DEFAULT_CURRENCY_TABLE)

    assert priced.starting_price == pytest.approx(85.0)
    assert priced.main.display_price == pytest.approx(150.0)
    assert [variant.item_id for variant in priced.variants] == [2, 3, 4]


def test_starting_price_without_variants_is_own_total():
    priced = resolve_ornament(_ring(making_charges=1000), [], "INR", RATES, DEFAULT_CURRENCY_TABLE)
    assert priced.starting_price == pytest.approx(111000.0)


def test_variants_do_not_inherit_parent_metal():
    main = _ring()
    variant = {"id": 9, "weight": 5}
    priced = resolve_ornament(main, [variant], "INR", RATES, DEFAULT_CURRENCY_TABLE)
    assert priced.variants[0].base_price == 0


def test_variant_resolution_requires_configuration():
    with pytest.raises(ConfigurationError):
        resolve_ornament(_ring(), [], "INR", None, DEFAULT_CURRENCY_TABLE)
