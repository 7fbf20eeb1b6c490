from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

# ===== CLIENTES =====

class Client(Base, TimestampMixin):
    """Modelo de Cliente"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)
    street = Column(String(255))
    number = Column(String(50))
    neighborhood = Column(String(255))
    city = Column(String(255))
    state = Column(String(2))
    zip_code = Column(String(20))
    address_details = Column(String(255))
    instagram = Column(String(255))
    observations = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    sales = relationship("Sale", back_populates="customer")
    appointments = relationship("Appointment", back_populates="client")
    receivables = relationship("AccountsReceivable", back_populates="customer")

# ===== PROVEEDORES =====

class Supplier(Base, TimestampMixin):
    """Modelo de Proveedor (baja lógica con is_active)"""
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    document_type = Column(String(10), nullable=False, default='CNPJ')
    document_number = Column(String(30), unique=True, index=True)
    contact_person = Column(String(255), nullable=False)
    phone = Column(String(20))
    email = Column(String(255))
    street = Column(String(255))
    city = Column(String(255))
    state = Column(String(2))
    zip_code = Column(String(20))
    notes = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    products = relationship("Product", back_populates="supplier")
    backlog_entries = relationship("PurchaseBacklog", back_populates="supplier")

# ===== CATÁLOGO =====

class Product(Base, TimestampMixin):
    """Modelo de Producto"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100))
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    supplier = relationship("Supplier", back_populates="products")
    variants = relationship("ProductVariant", back_populates="product", order_by="ProductVariant.id",
                            cascade="all, delete-orphan")

class ProductVariant(Base, TimestampMixin):
    """Variación de producto (talla/color) con precio y stock propios"""
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    size = Column(String(50), nullable=False)
    color = Column(String(100), nullable=False)
    sku = Column(String(100), unique=True, nullable=False, index=True)
    buy_price = Column(Numeric(10, 2), nullable=False, default=0)
    sale_price = Column(Numeric(10, 2), nullable=False, default=0)
    # Puede quedar negativo: venta sin stock (backorder)
    quantity = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=0)

    # Relationships
    product = relationship("Product", back_populates="variants")
    price_history = relationship("PriceHistory", back_populates="variant", order_by="PriceHistory.id",
                                 cascade="all, delete-orphan")

    @property
    def is_low_stock(self):
        return self.quantity <= self.minimum_stock

class PriceHistory(Base):
    """Historial de precios anteriores de una variación (solo se agrega)"""
    __tablename__ = "price_history"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False, index=True)
    buy_price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=False)
    changed_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    # Relationships
    variant = relationship("ProductVariant", back_populates="price_history")

# ===== CONFIGURACIÓN DE VENTAS =====

class SaleSetting(Base, TimestampMixin):
    """Configuración general de ventas (una sola fila)"""
    __tablename__ = "sale_settings"

    id = Column(Integer, primary_key=True, index=True)
    default_margin_percentage = Column(Numeric(5, 2), nullable=False, default=30)

class PaymentMethod(Base):
    """Forma de pago habilitada en la tienda"""
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(20), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    max_installments = Column(Integer, default=1, nullable=False)

class InstallmentRule(Base, TimestampMixin):
    """Tramo de parcelamiento: aplica desde un valor mínimo de compra"""
    __tablename__ = "installment_rules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, default="Regla General")
    min_purchase_value = Column(Numeric(10, 2), nullable=False, unique=True)

    # Relationships
    rules = relationship("InstallmentRuleDetail", back_populates="rule",
                         order_by="InstallmentRuleDetail.installments",
                         cascade="all, delete-orphan")

class InstallmentRuleDetail(Base):
    """Tasa de interés para un número de cuotas dentro de un tramo"""
    __tablename__ = "installment_rule_details"

    id = Column(Integer, primary_key=True, index=True)
    rule_id = Column(Integer, ForeignKey("installment_rules.id"), nullable=False)
    installments = Column(Integer, nullable=False)
    interest_rate_percentage = Column(Numeric(5, 2), nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('rule_id', 'installments', name='installment_rule_details_unique_count'),
    )

    # Relationships
    rule = relationship("InstallmentRule", back_populates="rules")

# ===== VENTAS =====

class Sale(Base, TimestampMixin):
    """Modelo de Venta"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("clients.id"), index=True)
    subtotal_amount = Column(Numeric(10, 2), nullable=False)
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    interest_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, default='paid')
    fulfillment_status = Column(String(20), nullable=False, default='ready_to_ship', index=True)
    notes = Column(Text)
    sale_date = Column(DateTime, server_default=func.current_timestamp())
    canceled_at = Column(DateTime)

    # Relationships
    customer = relationship("Client", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale", order_by="SaleItem.id",
                         cascade="all, delete-orphan")
    payments = relationship("SalePayment", back_populates="sale", order_by="SalePayment.id",
                            cascade="all, delete-orphan")

class SaleItem(Base):
    """Modelo de Item de Venta"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False)
    sku_at_sale = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_sale_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    fulfillment_status = Column(String(20), nullable=False, default='fulfilled')

    # Relationships
    sale = relationship("Sale", back_populates="items")
    variant = relationship("ProductVariant")

class SalePayment(Base):
    """Pago de una venta (hasta dos por venta: entrada + cuotas)"""
    __tablename__ = "sale_payments"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    method = Column(String(20), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    installments = Column(Integer, nullable=False, default=1)
    interest_rate_percentage = Column(Numeric(5, 2), nullable=False, default=0)

    # Relationships
    sale = relationship("Sale", back_populates="payments")

# ===== CUENTAS POR COBRAR =====

class AccountsReceivable(Base, TimestampMixin):
    """Una fila por cuota de una venta a crédito"""
    __tablename__ = "accounts_receivable"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default='PENDING')
    installment_number = Column(Integer, nullable=False)
    total_installments = Column(Integer, nullable=False)

    __table_args__ = (
        Index('ix_accounts_receivable_customer_status', 'customer_id', 'status'),
    )

    # Relationships
    customer = relationship("Client", back_populates="receivables")
    sale = relationship("Sale")

# ===== PENDIENTES DE COMPRA =====

class PurchaseBacklog(Base, TimestampMixin):
    """Necesidad de compra generada por un item vendido sin stock"""
    __tablename__ = "purchase_backlog"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False)
    quantity_needed = Column(Integer, nullable=False)
    source_sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    source_sale_item_id = Column(Integer, ForeignKey("sale_items.id"), nullable=False, unique=True)
    status = Column(String(30), nullable=False, default='awaiting_purchase', index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), index=True)
    purchase_order_ref = Column(String(100))

    # Relationships
    supplier = relationship("Supplier", back_populates="backlog_entries")
    variant = relationship("ProductVariant")
    source_sale = relationship("Sale")
    source_sale_item = relationship("SaleItem")

# ===== AGENDA =====

class Appointment(Base, TimestampMixin):
    """Cita de atención a domicilio"""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default='confirmed', index=True)
    notes = Column(Text)

    # Relationships
    client = relationship("Client", back_populates="appointments")

class AvailabilitySlot(Base, TimestampMixin):
    """Horario disponible para agendar"""
    __tablename__ = "availability_slots"

    id = Column(Integer, primary_key=True, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    is_booked = Column(Boolean, default=False, nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"))

    # Relationships
    appointment = relationship("Appointment")
