import re
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

PHONE_DIGITS = re.compile(r"\D")


def normalize_phone(value: str) -> str:
    digits = PHONE_DIGITS.sub("", value or "")
    if len(digits) not in (10, 11):
        raise ValueError("El teléfono debe tener 10 u 11 dígitos (DDD + número)")
    return digits


def normalize_name(value: str) -> str:
    return " ".join(word.capitalize() for word in value.split())


class ClientsBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class AddressRequest(BaseModel):
    street: Optional[str] = None
    number: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = None
    address_details: Optional[str] = None

class ClientCreateRequest(AddressRequest):
    name: str = Field(..., min_length=1, description="Nombre del cliente")
    phone_number: str = Field(..., description="Teléfono con DDD")
    instagram: Optional[str] = None
    observations: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str):
        v = normalize_name(v)
        if not v:
            raise ValueError('El nombre es obligatorio')
        return v

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str):
        return normalize_phone(v)

    @field_validator('state')
    @classmethod
    def validate_state(cls, v: Optional[str]):
        return v.upper() if v else v

# ==================== RESPONSE SCHEMAS ====================

class ClientResponse(ClientsBaseModel):
    id: int
    name: str
    phone_number: str
    street: Optional[str]
    number: Optional[str]
    neighborhood: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    address_details: Optional[str]
    instagram: Optional[str]
    observations: Optional[str]
    is_active: bool
    created_at: datetime
