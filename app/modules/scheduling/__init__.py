"""
Módulo de Agenda - horarios disponibles y citas
"""

from .router import availability_router, appointments_router
from .service import SchedulingService
from .repository import SchedulingRepository

__all__ = [
    "availability_router",
    "appointments_router",
    "SchedulingService",
    "SchedulingRepository"
]
