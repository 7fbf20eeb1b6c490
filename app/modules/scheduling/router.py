# app/modules/scheduling/router.py
from datetime import date
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.modules.notifications import NotificationService, get_notification_service
from .service import SchedulingService
from .schemas import (
    SlotsCreateRequest, SlotResponse, PublicSlotResponse, AvailableDaysResponse,
    AppointmentBookRequest, AppointmentResponse
)

availability_router = APIRouter(prefix="/availability", tags=["Availability"])
appointments_router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_scheduling_service(
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service)
) -> SchedulingService:
    return SchedulingService(db, notifications=notifications)

# ==================== HORARIOS ====================

@availability_router.post("", response_model=List[SlotResponse], status_code=status.HTTP_201_CREATED)
async def create_availability_slots(
    request: SlotsCreateRequest,
    service: SchedulingService = Depends(get_scheduling_service)
):
    return service.create_slots(request.slots)

@availability_router.get("", response_model=List[SlotResponse])
async def get_admin_availability(
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: SchedulingService = Depends(get_scheduling_service)
):
    """
    Horarios libres y reservados del período (vista de administración)
    """
    return service.get_admin_availability(start_date, end_date)

@availability_router.get("/public", response_model=List[PublicSlotResponse])
async def get_public_slots(
    day: date = Query(..., description="Día a consultar"),
    service: SchedulingService = Depends(get_scheduling_service)
):
    return service.get_public_slots(day)

@availability_router.get("/days", response_model=AvailableDaysResponse)
async def get_available_days(
    year: int = Query(...),
    month: int = Query(...),
    service: SchedulingService = Depends(get_scheduling_service)
):
    """
    Días del mes con horarios libres (para el calendario público)
    """
    days = service.get_available_days(year, month)
    return AvailableDaysResponse(year=year, month=month, days=days)

@availability_router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability_slot(
    slot_id: int,
    service: SchedulingService = Depends(get_scheduling_service)
):
    service.delete_slot(slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ==================== CITAS ====================

@appointments_router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    booking: AppointmentBookRequest,
    service: SchedulingService = Depends(get_scheduling_service)
):
    """
    Reservar horario. 409 si el horario ya fue tomado.
    """
    return service.book_appointment(booking)

@appointments_router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service)
):
    return service.list_appointments(start_date, end_date)

@appointments_router.patch("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    service: SchedulingService = Depends(get_scheduling_service)
):
    return service.cancel_appointment(appointment_id)
