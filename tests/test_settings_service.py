from decimal import Decimal

import pytest

from app.core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from app.modules.settings import SettingsService
from app.modules.settings.schemas import (
    InstallmentRuleCreateRequest, InstallmentRuleUpdateRequest, SaleSettingsUpdateRequest
)


@pytest.fixture
def service(db_session):
    return SettingsService(db_session)


def rule_request(min_value, rules, name="Tramo"):
    return InstallmentRuleCreateRequest(name=name, min_purchase_value=min_value, rules=rules)


def test_first_read_seeds_defaults(service):
    settings = service.get_settings()

    methods = {m.key: m for m in settings["payment_methods"]}
    assert set(methods) == {"cash", "card", "pix", "credit"}
    assert methods["card"].max_installments == 12
    assert methods["credit"].max_installments == 4

    tiers = service.get_tiers()
    assert len(tiers) == 1
    assert tiers[0].rates == {1: Decimal("0"), 2: Decimal("5.5"), 3: Decimal("6.5")}

    # Second read does not seed again
    service.get_settings()
    assert len(service.list_installment_rules()) == 1


def test_deactivated_method_is_rejected(service):
    service.update_settings(SaleSettingsUpdateRequest(payment_methods=[{"key": "pix", "is_active": False}]))

    with pytest.raises(BusinessRuleError):
        service.get_payment_method("pix")
    assert service.get_payment_method("cash").key == "cash"


def test_rules_are_returned_in_ascending_order(service):
    service.get_settings()
    service.create_installment_rule(rule_request(Decimal("1000"), [{"installments": 6, "interest_rate_percentage": "9"}]))
    service.create_installment_rule(rule_request(Decimal("500"), [{"installments": 4, "interest_rate_percentage": "7"}]))

    assert [t.min_purchase_value for t in service.get_tiers()] == [Decimal("0"), Decimal("500"), Decimal("1000")]


def test_duplicate_minimum_value_is_a_conflict(service):
    service.create_installment_rule(rule_request(Decimal("300"), [{"installments": 2}]))

    with pytest.raises(ConflictError):
        service.create_installment_rule(rule_request(Decimal("300"), [{"installments": 3}]))


@pytest.mark.parametrize("min_value,rules", [
    (Decimal("-1"), [{"installments": 2}]),
    (Decimal("100"), []),
    (Decimal("100"), [{"installments": 0}]),
    (Decimal("100"), [{"installments": 2, "interest_rate_percentage": "100"}]),
    (Decimal("100"), [{"installments": 2}, {"installments": 2}]),
])
def test_invalid_rules_are_rejected(service, min_value, rules):
    with pytest.raises(ValidationError):
        service.create_installment_rule(rule_request(min_value, rules))


def test_update_replaces_rule_options(service):
    rule = service.create_installment_rule(rule_request(Decimal("800"), [{"installments": 2}]))

    updated = service.update_installment_rule(rule.id, InstallmentRuleUpdateRequest(
        rules=[{"installments": 5, "interest_rate_percentage": "8"}, {"installments": 1}]
    ))

    assert [(r.installments, r.interest_rate_percentage) for r in updated.rules] == [
        (1, Decimal("0")), (5, Decimal("8"))
    ]

    service.delete_installment_rule(rule.id)
    with pytest.raises(NotFoundError):
        service.delete_installment_rule(rule.id)


def test_payment_conditions_repass_rate(service):
    conditions = service.get_payment_conditions(Decimal("300"))

    assert [c["installments"] for c in conditions] == [1, 2, 3]
    assert conditions[0]["description"] == "Al contado"
    assert conditions[1]["total_value"] == Decimal("317.46")
    assert conditions[1]["value"] == Decimal("158.73")
    assert conditions[1]["description"] == "2x de R$ 158,73 (Total R$ 317,46 con 5.5%)"
    assert conditions[2]["total_value"] == Decimal("320.86")


def test_payment_conditions_skip_installments_under_minimum(service):
    conditions = service.get_payment_conditions(Decimal("1.50"))

    assert [c["installments"] for c in conditions] == [1]


def test_payment_conditions_require_positive_value(service):
    with pytest.raises(ValidationError):
        service.get_payment_conditions(Decimal("0"))
