from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.modules.receivables import ReceivablesService, build_schedule, split_installments
from app.shared.database.models import AccountsReceivable, Sale


@pytest.mark.parametrize("total,installments,expected", [
    (Decimal("300.00"), 3, ["100.00", "100.00", "100.00"]),
    (Decimal("300.01"), 3, ["100.01", "100.00", "100.00"]),
    (Decimal("100.00"), 3, ["33.34", "33.33", "33.33"]),
    (Decimal("962.57"), 3, ["320.87", "320.85", "320.85"]),
    (Decimal("50"), 1, ["50.00"]),
])
def test_split_installments_is_cent_exact(total, installments, expected):
    amounts = split_installments(total, installments)

    assert amounts == [Decimal(value) for value in expected]
    assert sum(amounts) == total
    assert all(amounts[0] >= amount for amount in amounts[1:])


def test_split_installments_requires_at_least_one():
    with pytest.raises(ValidationError):
        split_installments(Decimal("100"), 0)


def test_schedule_due_dates_are_one_month_apart_from_reference():
    schedule = build_schedule(Decimal("90"), 3, date(2024, 1, 31))

    assert [entry.number for entry in schedule] == [1, 2, 3]
    assert [entry.due_date for entry in schedule] == [
        date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)
    ]


@pytest.fixture
def credit_sale(db_session, customer):
    sale = Sale(
        customer_id=customer.id, subtotal_amount=Decimal("300"), total_amount=Decimal("300"),
        payment_status="paid", fulfillment_status="ready_to_ship"
    )
    db_session.add(sale)
    db_session.flush()
    db_session.add_all([
        AccountsReceivable(
            customer_id=customer.id, sale_id=sale.id, amount=Decimal("100"),
            due_date=due, status="PENDING", installment_number=number, total_installments=3
        )
        for number, due in enumerate([date(2024, 1, 10), date(2024, 2, 10), date(2024, 3, 10)], start=1)
    ])
    db_session.commit()
    return sale


def test_mark_overdue_only_touches_pending_past_due(db_session, credit_sale):
    service = ReceivablesService(db_session)

    updated = service.mark_overdue(date(2024, 2, 15))

    assert updated == 2
    statuses = [r.status for r in service.list_receivables(customer_id=credit_sale.customer_id)]
    assert statuses == ["OVERDUE", "OVERDUE", "PENDING"]
    assert service.get_open_amount() == Decimal("300.00")


def test_update_status_validates_status_and_id(db_session, credit_sale):
    service = ReceivablesService(db_session)
    receivable = service.list_receivables()[0]

    paid = service.update_status(receivable.id, "paid")
    assert paid.status == "PAID"
    assert [r.id for r in service.list_receivables(status="PAID")] == [receivable.id]

    with pytest.raises(ValidationError):
        service.update_status(receivable.id, "LOST")
    with pytest.raises(NotFoundError):
        service.update_status(9999, "PAID")


def test_schedule_from_sale_date_keeps_month_end():
    schedule = build_schedule(Decimal("300"), 3, date(2026, 1, 31), first_month=1)

    assert [entry.due_date for entry in schedule] == [
        date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)
    ]
