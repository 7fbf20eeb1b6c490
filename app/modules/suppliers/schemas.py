import re
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

DOCUMENT_DIGITS = re.compile(r"\D")
EMAIL_PATTERN = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,}$")


class DocumentType(str, Enum):
    CNPJ = "CNPJ"
    CPF = "CPF"
    OUTRO = "OUTRO"


class SuppliersBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SupplierFieldsRequest(BaseModel):
    """Campos editables, comunes a alta y actualización"""
    contact_person: Optional[str] = Field(None, description="Persona de contacto")
    phone: Optional[str] = None
    email: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: Optional[str]):
        if v is None:
            return v
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Email inválido')
        return v

    @field_validator('state')
    @classmethod
    def validate_state(cls, v: Optional[str]):
        return v.upper() if v else v

class SupplierCreateRequest(SupplierFieldsRequest):
    name: str = Field(..., min_length=1, description="Nombre del proveedor")
    document_type: DocumentType = Field(DocumentType.CNPJ, description="Tipo de documento")
    document_number: Optional[str] = Field(None, description="CNPJ/CPF; único si se informa")
    contact_person: str = Field(..., min_length=1, description="Persona de contacto")

    @field_validator('name', 'contact_person')
    @classmethod
    def strip_required(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError('Campo obligatorio')
        return v

    @field_validator('document_number')
    @classmethod
    def normalize_document(cls, v: Optional[str]):
        if v is None:
            return v
        digits = DOCUMENT_DIGITS.sub("", v)
        return digits or None

class SupplierUpdateRequest(SupplierFieldsRequest):
    name: Optional[str] = Field(None, min_length=1)

# ==================== RESPONSE SCHEMAS ====================

class SupplierResponse(SuppliersBaseModel):
    id: int
    name: str
    document_type: str
    document_number: Optional[str]
    contact_person: str
    phone: Optional[str]
    email: Optional[str]
    street: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    notes: Optional[str]
    is_active: bool
    created_at: datetime
