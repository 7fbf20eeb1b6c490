import pytest

from app.core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from app.modules.backlog import BacklogService
from app.modules.backlog.schemas import BacklogStatusUpdateRequest
from app.modules.sales import SalesService
from app.modules.sales.schemas import SaleCreateRequest
from app.modules.suppliers import SuppliersService
from app.modules.suppliers.schemas import SupplierCreateRequest


@pytest.fixture
def backlog_entry(db_session, notifications, variant_out_of_stock):
    SalesService(db_session, notifications=notifications).create_sale(SaleCreateRequest(
        items=[{"variant_id": variant_out_of_stock.id, "quantity": 3}],
        payments=[{"method": "cash"}]
    ))
    return BacklogService(db_session).list_backlog()[0]


def update(status, **kwargs):
    return BacklogStatusUpdateRequest(status=status, **kwargs)


def test_backlog_lists_awaiting_purchase_by_default(db_session, backlog_entry):
    service = BacklogService(db_session)

    assert [entry.id for entry in service.list_backlog()] == [backlog_entry.id]
    assert service.list_backlog("received") == []
    assert backlog_entry.quantity_needed == 3
    assert service.count_open() == 1


def test_backlog_follows_purchase_flow(db_session, backlog_entry):
    service = BacklogService(db_session)

    sent = service.update_status(backlog_entry.id, update("purchase_order_sent", purchase_order_ref="PO-0042"))
    assert sent.status == "purchase_order_sent"
    assert sent.purchase_order_ref == "PO-0042"

    received = service.update_status(backlog_entry.id, update("received"))
    assert received.status == "received"
    assert service.count_open() == 0


def test_received_cannot_go_back_to_awaiting_purchase(db_session, backlog_entry):
    service = BacklogService(db_session)
    service.update_status(backlog_entry.id, update("purchase_order_sent"))
    service.update_status(backlog_entry.id, update("received"))

    with pytest.raises(BusinessRuleError):
        service.update_status(backlog_entry.id, update("awaiting_purchase"))


def test_cannot_skip_purchase_order(db_session, backlog_entry):
    with pytest.raises(BusinessRuleError):
        BacklogService(db_session).update_status(backlog_entry.id, update("received"))


def test_unknown_status_or_entry(db_session, backlog_entry):
    service = BacklogService(db_session)

    with pytest.raises(ValidationError):
        service.update_status(backlog_entry.id, update("lost"))
    with pytest.raises(ValidationError):
        service.list_backlog("lost")
    with pytest.raises(NotFoundError):
        service.update_status(9999, update("canceled"))


def test_backlog_copies_product_supplier_and_filters_by_it(db_session, supplier, backlog_entry):
    service = BacklogService(db_session)

    assert backlog_entry.supplier_id == supplier.id
    assert [entry.id for entry in service.list_backlog(supplier_id=supplier.id)] == [backlog_entry.id]
    assert service.list_backlog(supplier_id=supplier.id + 1) == []


def test_purchase_order_can_go_to_another_supplier(db_session, backlog_entry):
    other = SuppliersService(db_session).create_supplier(SupplierCreateRequest(
        name="Confecções Leste", contact_person="Davi"
    ))
    service = BacklogService(db_session)

    with pytest.raises(NotFoundError):
        service.update_status(backlog_entry.id, update("purchase_order_sent", supplier_id=9999))

    sent = service.update_status(backlog_entry.id, update("purchase_order_sent", supplier_id=other.id))
    assert sent.supplier_id == other.id
