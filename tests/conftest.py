"""
Pytest fixtures for the boutique API tests.

Every test gets its own app over an in-memory SQLite database; service-level
tests use ``db_session`` taken from that same database.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.main import create_app
from app.modules.notifications import NotificationService
from app.shared.database.models import Client, Product, ProductVariant, Supplier


class RecordingSender:
    """Guarda los avisos en memoria en lugar de enviarlos"""

    def __init__(self):
        self.messages = []

    def send(self, topic, title, body, data):
        self.messages.append({"topic": topic, "title": title, "body": body, "data": data})
        return f"msg-{len(self.messages)}"


class FailingSender:
    def send(self, topic, title, body, data):
        raise RuntimeError("push service unavailable")


@pytest.fixture(scope='session')
def test_settings():
    return Settings(
        database_url="sqlite:///:memory:",
        create_tables_on_startup=True,
        log_level="WARNING",
        debug=False,
    )


@pytest.fixture(scope='function')
def client(test_settings):
    """Test client; the context manager runs the app lifespan."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope='function')
def db_session(client):
    session = client.app.state.db.session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def sender():
    return RecordingSender()


@pytest.fixture(scope='function')
def notifications(sender):
    return NotificationService(sender=sender)


@pytest.fixture(scope='function')
def failing_notifications():
    return NotificationService(sender=FailingSender())


@pytest.fixture(scope='function')
def supplier(db_session):
    supplier = Supplier(
        name="Atelier Sul", document_type="CNPJ", document_number="12345678000190",
        contact_person="Rita Prado", phone="5132224455", is_active=True
    )
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture(scope='function')
def product(db_session, supplier):
    """Vestido con una talla en stock y otra agotada."""
    product = Product(name="Vestido Floral", category="Vestidos", supplier_id=supplier.id)
    product.variants = [
        ProductVariant(
            size="M", color="Azul", sku="VF-M-AZ",
            buy_price=Decimal("200.00"), sale_price=Decimal("500.00"),
            quantity=5, minimum_stock=1
        ),
        ProductVariant(
            size="G", color="Azul", sku="VF-G-AZ",
            buy_price=Decimal("100.00"), sale_price=Decimal("250.00"),
            quantity=0, minimum_stock=0
        ),
    ]
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def variant_in_stock(product):
    return product.variants[0]


@pytest.fixture(scope='function')
def variant_out_of_stock(product):
    return product.variants[1]


@pytest.fixture(scope='function')
def customer(db_session):
    client = Client(name="Maria Silva", phone_number="11987654321", city="São Paulo", is_active=True)
    db_session.add(client)
    db_session.commit()
    return client
