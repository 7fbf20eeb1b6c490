# app/modules/scheduling/repository.py
from typing import List, Optional, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Session, selectinload

from app.shared.database.models import Appointment, AvailabilitySlot

class SchedulingRepository:

    def __init__(self, db: Session):
        self.db = db

    # ==================== HORARIOS ====================

    def create_slots(self, slots_data: List[Dict[str, Any]]) -> List[AvailabilitySlot]:
        slots = [AvailabilitySlot(is_booked=False, **data) for data in slots_data]
        self.db.add_all(slots)
        self.db.flush()
        return slots

    def get_slot(self, slot_id: int) -> Optional[AvailabilitySlot]:
        return self.db.query(AvailabilitySlot).filter(AvailabilitySlot.id == slot_id).first()

    def get_slot_for_update(self, slot_id: int) -> Optional[AvailabilitySlot]:
        return self.db.query(AvailabilitySlot).filter(
            AvailabilitySlot.id == slot_id
        ).with_for_update().first()

    def get_slot_by_appointment(self, appointment_id: int) -> Optional[AvailabilitySlot]:
        return self.db.query(AvailabilitySlot).filter(
            AvailabilitySlot.appointment_id == appointment_id
        ).first()

    def delete_slot(self, slot: AvailabilitySlot):
        self.db.delete(slot)
        self.db.flush()

    def find_slots_in_range(self, start: datetime, end: datetime, only_free: bool = False) -> List[AvailabilitySlot]:
        """Horarios con inicio en [start, end)"""
        query = self.db.query(AvailabilitySlot).filter(
            AvailabilitySlot.start_time >= start,
            AvailabilitySlot.start_time < end
        )
        if only_free:
            query = query.filter(AvailabilitySlot.is_booked.is_(False))
        return query.order_by(AvailabilitySlot.start_time).all()

    # ==================== CITAS ====================

    def create_appointment(self, appointment_data: Dict[str, Any]) -> Appointment:
        appointment = Appointment(**appointment_data)
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.query(Appointment).options(
            selectinload(Appointment.client)
        ).filter(Appointment.id == appointment_id).first()

    def find_appointments(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Appointment]:
        query = self.db.query(Appointment).options(selectinload(Appointment.client))
        if start:
            query = query.filter(Appointment.start_time >= start)
        if end:
            query = query.filter(Appointment.start_time < end)
        return query.order_by(Appointment.start_time).all()
