"""
Módulo de Clientes
"""

from .router import router as clients_router
from .service import ClientsService
from .repository import ClientsRepository

__all__ = [
    "clients_router",
    "ClientsService",
    "ClientsRepository"
]
