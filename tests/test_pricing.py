from decimal import Decimal

import pytest

from app.core.exceptions import ValidationError
from app.shared.pricing import (
    CASH_TIER, Tier, format_currency, repass_interest, resolve_tier, select_tier, to_money
)

TIERS = [
    Tier(Decimal("0"), {1: Decimal("0"), 2: Decimal("5.5"), 3: Decimal("6.5")}, "Regla General"),
    Tier(Decimal("500"), {1: Decimal("0"), 4: Decimal("7")}, "Desde 500"),
    Tier(Decimal("1000"), {1: Decimal("0"), 6: Decimal("9")}, "Desde 1000"),
]


def test_repass_interest_without_rate_returns_principal():
    assert repass_interest(Decimal("900"), 0) == (Decimal("900.00"), Decimal("0.00"))


def test_repass_interest_grosses_up_principal():
    total, interest = repass_interest(Decimal("900"), Decimal("6.5"))

    assert total == Decimal("962.57")
    assert interest == Decimal("62.57")


@pytest.mark.parametrize("rate", [Decimal("-1"), Decimal("100"), Decimal("150")])
def test_repass_interest_rejects_rates_outside_range(rate):
    with pytest.raises(ValidationError):
        repass_interest(Decimal("100"), rate)


def test_to_money_rounds_half_up():
    assert to_money(Decimal("2.345")) == Decimal("2.35")
    assert to_money(0.1) == Decimal("0.10")


@pytest.mark.parametrize("amount,expected", [
    (Decimal("0"), "Regla General"),
    (Decimal("499.99"), "Regla General"),
    (Decimal("500"), "Desde 500"),
    (Decimal("999.99"), "Desde 500"),
    (Decimal("1000"), "Desde 1000"),
    (Decimal("25000"), "Desde 1000"),
])
def test_select_tier_picks_largest_minimum_not_above_amount(amount, expected):
    assert select_tier(TIERS, amount).name == expected


def test_select_tier_returns_none_below_smallest_minimum():
    tiers = [Tier(Decimal("100"), {1: Decimal("0")})]

    assert select_tier(tiers, Decimal("99.99")) is None
    assert resolve_tier(tiers, Decimal("99.99")) is CASH_TIER


def test_tier_exposes_allowed_installments_sorted():
    assert TIERS[0].allowed_installments == [1, 2, 3]
    assert TIERS[0].rate_for(5) is None


def test_format_currency_uses_brazilian_separators():
    assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_currency(Decimal("12"), "USD") == "US$ 12,00"
