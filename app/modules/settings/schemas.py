from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

# ==================== ENUMS ====================

class PaymentMethodKey(str, Enum):
    cash = "cash"
    card = "card"
    pix = "pix"
    credit = "credit"

# ==================== CLASE BASE PARA RESPUESTAS ====================

class SettingsBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class PaymentMethodUpdateRequest(BaseModel):
    key: PaymentMethodKey
    name: Optional[str] = None
    is_active: Optional[bool] = None
    max_installments: Optional[int] = Field(None, ge=1, le=24)

class SaleSettingsUpdateRequest(BaseModel):
    default_margin_percentage: Optional[Decimal] = Field(None, description="Margen de ganancia por defecto")
    payment_methods: Optional[List[PaymentMethodUpdateRequest]] = None

class InstallmentRuleDetailSchema(SettingsBaseModel):
    installments: int = Field(..., description="Número de cuotas")
    interest_rate_percentage: Decimal = Field(Decimal("0"), description="Tasa repasada al cliente (%)")

class InstallmentRuleCreateRequest(BaseModel):
    name: str = Field("Regla General", description="Nombre del tramo")
    min_purchase_value: Decimal = Field(..., description="Valor mínimo de compra del tramo")
    rules: List[InstallmentRuleDetailSchema] = Field(default_factory=list)

class InstallmentRuleUpdateRequest(BaseModel):
    name: Optional[str] = None
    min_purchase_value: Optional[Decimal] = None
    rules: Optional[List[InstallmentRuleDetailSchema]] = None

# ==================== RESPONSE SCHEMAS ====================

class PaymentMethodResponse(SettingsBaseModel):
    key: str
    name: str
    is_active: bool
    max_installments: int

class SaleSettingsResponse(SettingsBaseModel):
    default_margin_percentage: Decimal
    payment_methods: List[PaymentMethodResponse]

class InstallmentRuleResponse(SettingsBaseModel):
    id: int
    name: str
    min_purchase_value: Decimal
    rules: List[InstallmentRuleDetailSchema]

class PaymentConditionResponse(SettingsBaseModel):
    installments: int
    value: Decimal
    total_value: Decimal
    interest_rate: Decimal
    description: str
