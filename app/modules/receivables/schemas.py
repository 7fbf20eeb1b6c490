from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

class ReceivableStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"

class ReceivablesBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class ReceivableStatusUpdateRequest(BaseModel):
    status: str = Field(..., description="PENDING, PAID u OVERDUE")

class MarkOverdueRequest(BaseModel):
    today: Optional[date] = Field(None, description="Fecha de corte; por defecto hoy")

# ==================== RESPONSE SCHEMAS ====================

class ReceivableCustomerResponse(ReceivablesBaseModel):
    id: int
    name: str
    phone_number: str

class ReceivableResponse(ReceivablesBaseModel):
    id: int
    customer_id: int
    sale_id: int
    amount: Decimal
    due_date: date
    status: ReceivableStatus
    installment_number: int
    total_installments: int
    customer: Optional[ReceivableCustomerResponse] = None

class MarkOverdueResponse(BaseModel):
    updated: int
