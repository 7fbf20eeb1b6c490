from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

# ==================== CLASE BASE PARA RESPUESTAS ====================

class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class VariantCreateRequest(BaseModel):
    size: str = Field(..., min_length=1, description="Talla")
    color: str = Field(..., min_length=1, description="Color")
    sku: str = Field(..., min_length=3, description="Código único de la variación")
    buy_price: Decimal = Field(..., ge=0, description="Precio de compra")
    sale_price: Decimal = Field(..., ge=0, description="Precio de venta")
    quantity: int = Field(0, ge=0, description="Stock inicial")
    minimum_stock: int = Field(0, ge=0, description="Stock mínimo para alerta")

    @field_validator('sku')
    @classmethod
    def normalize_sku(cls, v: str):
        return v.strip().upper()

class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Nombre del producto")
    description: Optional[str] = Field(None, description="Descripción")
    category: Optional[str] = Field(None, description="Categoría")
    supplier_id: Optional[int] = Field(None, description="Proveedor")
    variants: List[VariantCreateRequest] = Field(..., min_length=1, description="Variaciones del producto")

    @field_validator('variants')
    @classmethod
    def validate_unique_skus(cls, v: List[VariantCreateRequest]):
        skus = [variant.sku for variant in v]
        if len(skus) != len(set(skus)):
            raise ValueError('Las variaciones no pueden repetir SKU')
        return v

class VariantPriceUpdateRequest(BaseModel):
    buy_price: Decimal = Field(..., ge=0)
    sale_price: Decimal = Field(..., ge=0)

class StockAdjustmentRequest(BaseModel):
    delta: int = Field(..., description="Unidades a sumar (positivo) o restar (negativo)")
    reason: Optional[str] = Field(None, description="Motivo del ajuste")

    @field_validator('delta')
    @classmethod
    def validate_delta(cls, v: int):
        if v == 0:
            raise ValueError('El ajuste no puede ser cero')
        return v

# ==================== RESPONSE SCHEMAS ====================

class PriceHistoryResponse(CatalogBaseModel):
    buy_price: Decimal
    sale_price: Decimal
    changed_at: datetime

class VariantResponse(CatalogBaseModel):
    id: int
    product_id: int
    size: str
    color: str
    sku: str
    buy_price: Decimal
    sale_price: Decimal
    quantity: int
    minimum_stock: int
    is_low_stock: bool
    price_history: List[PriceHistoryResponse] = []

class ProductResponse(CatalogBaseModel):
    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    supplier_id: Optional[int]
    is_active: bool
    variants: List[VariantResponse]
