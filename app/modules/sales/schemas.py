from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class PaymentStatus(str, Enum):
    paid = "paid"
    canceled = "canceled"

class FulfillmentStatus(str, Enum):
    ready_to_ship = "ready_to_ship"
    awaiting_stock = "awaiting_stock"
    partial = "partial"
    fulfilled = "fulfilled"
    canceled = "canceled"

class ItemFulfillmentStatus(str, Enum):
    fulfilled = "fulfilled"
    pending_stock = "pending_stock"

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(BaseModel):
    variant_id: int = Field(..., description="Variación vendida")
    quantity: int = Field(..., gt=0, description="Cantidad")

class PaymentIntentRequest(BaseModel):
    # str y no enum: una clave desconocida es regla de negocio, no 422
    method: str = Field(..., description="cash, card, pix o credit")
    amount: Optional[Decimal] = Field(None, description="Monto; obligatorio en la entrada de un pago dividido")
    installments: int = Field(1, description="Número de cuotas")

class SaleCreateRequest(BaseModel):
    customer_id: Optional[int] = Field(None, description="Cliente; obligatorio para ventas a crédito")
    items: List[SaleItemRequest] = Field(default_factory=list, description="Items de la venta")
    payments: List[PaymentIntentRequest] = Field(default_factory=list, description="Uno o dos pagos")
    discount_percentage: Optional[Decimal] = Field(None, description="Descuento (%), se limita a 0..100")
    due_date: Optional[date] = Field(None, description="Vencimiento de la primera cuota a crédito")
    notes: Optional[str] = Field(None, description="Notas adicionales")

# ==================== RESPONSE SCHEMAS ====================

class SaleItemResponse(SalesBaseModel):
    id: int
    variant_id: int
    sku_at_sale: str
    quantity: int
    unit_sale_price: Decimal
    subtotal: Decimal
    fulfillment_status: ItemFulfillmentStatus

class SalePaymentResponse(SalesBaseModel):
    id: int
    method: str
    amount: Decimal
    installments: int
    interest_rate_percentage: Decimal

class SaleResponse(SalesBaseModel):
    id: int
    customer_id: Optional[int]
    subtotal_amount: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus
    fulfillment_status: FulfillmentStatus
    notes: Optional[str]
    sale_date: datetime
    canceled_at: Optional[datetime]
    items: List[SaleItemResponse]
    payments: List[SalePaymentResponse]

class SalesSummaryResponse(SalesBaseModel):
    total_sales: int
    canceled_sales: int
    total_revenue: Decimal
    total_discount: Decimal
    total_interest: Decimal
    awaiting_stock_sales: int
    open_backlog_items: int
    pending_receivables_amount: Decimal
    low_stock_variants: int
