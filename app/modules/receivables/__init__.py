"""
Módulo de Cuentas por Cobrar - cuotas de ventas a crédito
"""

from .router import router as receivables_router
from .service import ReceivablesService, split_installments, build_schedule
from .repository import ReceivablesRepository

__all__ = [
    "receivables_router",
    "ReceivablesService",
    "ReceivablesRepository",
    "split_installments",
    "build_schedule"
]
