from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

class BacklogStatus(str, Enum):
    awaiting_purchase = "awaiting_purchase"
    purchase_order_sent = "purchase_order_sent"
    received = "received"
    canceled = "canceled"

class BacklogBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

class BacklogStatusUpdateRequest(BaseModel):
    status: str = Field(..., description="Nuevo estado")
    purchase_order_ref: Optional[str] = Field(None, description="Referencia del pedido al proveedor")
    supplier_id: Optional[int] = Field(None, description="Proveedor al que se hace el pedido")

class BacklogVariantResponse(BacklogBaseModel):
    id: int
    sku: str
    size: str
    color: str
    quantity: int

class BacklogResponse(BacklogBaseModel):
    id: int
    variant_id: int
    quantity_needed: int
    source_sale_id: int
    source_sale_item_id: int
    status: BacklogStatus
    supplier_id: Optional[int]
    purchase_order_ref: Optional[str]
    created_at: datetime
    variant: Optional[BacklogVariantResponse] = None
