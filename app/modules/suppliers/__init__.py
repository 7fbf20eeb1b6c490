"""
Módulo de Proveedores
"""

from .router import router as suppliers_router
from .service import SuppliersService
from .repository import SuppliersRepository

__all__ = [
    "suppliers_router",
    "SuppliersService",
    "SuppliersRepository"
]
