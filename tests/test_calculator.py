from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.core.exceptions import BusinessRuleError, ValidationError
from app.modules.sales.calculator import clamp_discount, settle_payments
from app.modules.sales.schemas import PaymentIntentRequest
from app.shared.pricing import Tier

TIERS = [
    Tier(Decimal("0"), {1: Decimal("0"), 2: Decimal("5.5"), 3: Decimal("6.5")}),
    Tier(Decimal("1000"), {1: Decimal("0"), 6: Decimal("9")}),
]

METHODS = {
    "cash": SimpleNamespace(is_active=True, max_installments=1),
    "card": SimpleNamespace(is_active=True, max_installments=12),
    "pix": SimpleNamespace(is_active=False, max_installments=1),
    "credit": SimpleNamespace(is_active=True, max_installments=4),
}


def intent(method, installments=1, amount=None):
    return PaymentIntentRequest(method=method, installments=installments, amount=amount)


@pytest.mark.parametrize("value,expected", [
    (None, Decimal("0")),
    (Decimal("10"), Decimal("10")),
    (Decimal("-5"), Decimal("0")),
    (Decimal("150"), Decimal("100")),
])
def test_clamp_discount(value, expected):
    assert clamp_discount(value) == expected


def test_single_credit_payment_applies_tier_rate_on_net_amount():
    settlement = settle_payments(Decimal("1000"), Decimal("10"), [intent("credit", 3)], TIERS, METHODS)

    assert settlement.discount_amount == Decimal("100.00")
    assert settlement.net_amount == Decimal("900.00")
    assert settlement.total_amount == Decimal("962.57")
    assert settlement.interest_amount == Decimal("62.57")
    payment = settlement.payments[0]
    assert payment.interest_rate_percentage == Decimal("6.50")
    assert payment.amount == settlement.total_amount


def test_tier_is_chosen_from_net_amount_not_subtotal():
    settlement = settle_payments(Decimal("1000"), None, [intent("card", 6)], TIERS, METHODS)

    assert settlement.total_amount == Decimal("1098.90")
    assert settlement.interest_amount == Decimal("98.90")

    with pytest.raises(BusinessRuleError):
        settle_payments(Decimal("1000"), Decimal("10"), [intent("card", 6)], TIERS, METHODS)


def test_single_installment_method_pays_net_without_interest():
    settlement = settle_payments(Decimal("250"), Decimal("0"), [intent("cash")], TIERS, METHODS)

    assert settlement.total_amount == Decimal("250.00")
    assert settlement.interest_amount == Decimal("0.00")
    assert settlement.payments[0].interest_rate_percentage == Decimal("0.00")


def test_installments_missing_from_tier_are_not_permitted():
    with pytest.raises(BusinessRuleError) as exc_info:
        settle_payments(Decimal("300"), None, [intent("credit", 4)], TIERS, METHODS)

    assert exc_info.value.details["allowed_installments"] == [1, 2, 3]


def test_split_payment_never_charges_interest():
    settlement = settle_payments(
        Decimal("1000"), None,
        [intent("cash", amount=Decimal("100")), intent("credit", 3)],
        TIERS, METHODS
    )

    assert [p.amount for p in settlement.payments] == [Decimal("100.00"), Decimal("900.00")]
    assert all(p.interest_rate_percentage == 0 for p in settlement.payments)
    assert settlement.total_amount == settlement.net_amount == Decimal("1000.00")
    assert settlement.interest_amount == Decimal("0.00")


@pytest.mark.parametrize("entry_amount", [None, Decimal("0"), Decimal("-10"), Decimal("1000"), Decimal("1200")])
def test_split_payment_requires_entry_between_zero_and_net(entry_amount):
    with pytest.raises(BusinessRuleError):
        settle_payments(
            Decimal("1000"), None,
            [intent("cash", amount=entry_amount), intent("credit", 2)],
            TIERS, METHODS
        )


@pytest.mark.parametrize("intents", [
    [],
    [intent("cash"), intent("card"), intent("credit")],
])
def test_payment_count_must_be_one_or_two(intents):
    with pytest.raises(ValidationError):
        settle_payments(Decimal("100"), None, intents, TIERS, METHODS)


def test_inactive_or_unknown_method_is_rejected():
    with pytest.raises(BusinessRuleError):
        settle_payments(Decimal("100"), None, [intent("pix")], TIERS, METHODS)
    with pytest.raises(BusinessRuleError):
        settle_payments(Decimal("100"), None, [intent("bitcoin")], TIERS, METHODS)


def test_installments_above_method_limit_are_rejected():
    with pytest.raises(BusinessRuleError):
        settle_payments(Decimal("2000"), None, [intent("credit", 6)], TIERS, METHODS)
    with pytest.raises(ValidationError):
        settle_payments(Decimal("100"), None, [intent("card", 0)], TIERS, METHODS)
