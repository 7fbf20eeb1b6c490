from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import date, datetime
from enum import Enum

from app.modules.clients.schemas import ClientCreateRequest

class AppointmentStatus(str, Enum):
    confirmed = "confirmed"
    canceled = "canceled"
    completed = "completed"

class SchedulingBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SlotCreateRequest(BaseModel):
    start_time: datetime
    end_time: datetime

class SlotsCreateRequest(BaseModel):
    slots: List[SlotCreateRequest] = Field(default_factory=list, description="Horarios a publicar")

class AppointmentBookRequest(BaseModel):
    slot_id: int = Field(..., description="Horario elegido")
    client: ClientCreateRequest
    notes: Optional[str] = None

# ==================== RESPONSE SCHEMAS ====================

class PublicSlotResponse(SchedulingBaseModel):
    id: int
    start_time: datetime
    end_time: datetime
    is_booked: bool

class SlotResponse(PublicSlotResponse):
    appointment_id: Optional[int]

class AvailableDaysResponse(BaseModel):
    year: int
    month: int
    days: List[date]

class AppointmentClientResponse(SchedulingBaseModel):
    id: int
    name: str
    phone_number: str

class AppointmentResponse(SchedulingBaseModel):
    id: int
    client_id: int
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    notes: Optional[str]
    client: Optional[AppointmentClientResponse] = None
