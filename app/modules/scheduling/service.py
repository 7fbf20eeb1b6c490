# app/modules/scheduling/service.py
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional
from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from app.modules.clients import ClientsService
from app.modules.notifications import NotificationService
from app.shared.database.models import Appointment, AvailabilitySlot
from .repository import SchedulingRepository
from .schemas import AppointmentBookRequest, AppointmentStatus, SlotCreateRequest

logger = logging.getLogger(__name__)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


class SchedulingService:
    """
    Agenda de atención: horarios publicados por la tienda y citas
    reservadas por los clientes
    """

    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.repository = SchedulingRepository(db)
        self.clients = ClientsService(db)
        self.notifications = notifications or NotificationService()

    # ==================== HORARIOS (ADMIN) ====================

    def create_slots(self, slots: List[SlotCreateRequest]) -> List[AvailabilitySlot]:
        if not slots:
            raise ValidationError("Debe informar al menos un horario")

        for slot in slots:
            if slot.end_time <= slot.start_time:
                raise ValidationError(
                    "El horario de término debe ser posterior al de inicio",
                    details={"start_time": slot.start_time.isoformat(), "end_time": slot.end_time.isoformat()}
                )

        try:
            created = self.repository.create_slots([slot.model_dump() for slot in slots])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for slot in created:
            self.db.refresh(slot)
        logger.info(f"{len(created)} horarios publicados")
        return created

    def delete_slot(self, slot_id: int):
        slot = self.repository.get_slot(slot_id)
        if not slot:
            raise NotFoundError("Horario no encontrado")
        if slot.is_booked:
            raise BusinessRuleError("No se puede eliminar un horario ya reservado")

        try:
            self.repository.delete_slot(slot)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_admin_availability(self, start_date: date, end_date: date) -> List[AvailabilitySlot]:
        """Todos los horarios (libres y reservados) entre ambas fechas, inclusive"""
        if end_date < start_date:
            raise ValidationError("La fecha final no puede ser anterior a la inicial")
        return self.repository.find_slots_in_range(
            _start_of_day(start_date), _start_of_day(end_date + timedelta(days=1))
        )

    # ==================== HORARIOS (PÚBLICO) ====================

    def get_public_slots(self, day: date) -> List[AvailabilitySlot]:
        return self.repository.find_slots_in_range(
            _start_of_day(day), _start_of_day(day + timedelta(days=1))
        )

    def get_available_days(self, year: int, month: int, today: Optional[date] = None) -> List[date]:
        """
        Días del mes con al menos un horario libre, sin contar días ya
        pasados
        """
        if not year or not month or month < 1 or month > 12:
            raise ValidationError("Año y mes inválidos")

        today = today or date.today()
        month_start = date(year, month, 1)
        month_end = month_start + relativedelta(months=1)
        query_start = max(month_start, today)

        if query_start >= month_end:
            return []

        slots = self.repository.find_slots_in_range(
            _start_of_day(query_start), _start_of_day(month_end), only_free=True
        )
        return sorted({slot.start_time.date() for slot in slots})

    # ==================== CITAS ====================

    def book_appointment(self, booking: AppointmentBookRequest) -> Appointment:
        """
        Reservar un horario. El horario se bloquea dentro de la transacción;
        si ya fue tomado devuelve conflicto.
        """
        try:
            slot = self.repository.get_slot_for_update(booking.slot_id)
            if not slot:
                raise NotFoundError("Horario no encontrado")
            if slot.is_booked:
                raise ConflictError("Este horario acaba de ser reservado. Elija otro.")

            client = self.clients.find_or_create_by_phone(booking.client)
            appointment = self.repository.create_appointment({
                "client_id": client.id,
                "start_time": slot.start_time,
                "end_time": slot.end_time,
                "status": AppointmentStatus.confirmed.value,
                "notes": booking.notes,
            })

            slot.is_booked = True
            slot.appointment_id = appointment.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"Horario {booking.slot_id} reservado: cita {appointment.id}")

        self.notifications.notify_new_appointment(appointment, appointment.client.name)
        return appointment

    def cancel_appointment(self, appointment_id: int) -> Appointment:
        """Cancelar la cita y liberar su horario"""
        try:
            appointment = self.repository.get_appointment(appointment_id)
            if not appointment:
                raise NotFoundError("Cita no encontrada")

            appointment.status = AppointmentStatus.canceled.value
            slot = self.repository.get_slot_by_appointment(appointment.id)
            if slot is not None:
                slot.is_booked = False
                slot.appointment_id = None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"Cita {appointment.id} cancelada")
        return appointment

    def list_appointments(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[Appointment]:
        start = _start_of_day(start_date) if start_date else None
        end = _start_of_day(end_date + timedelta(days=1)) if end_date else None
        return self.repository.find_appointments(start, end)
