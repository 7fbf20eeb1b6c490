"""
Módulo de Pendientes de Compra (backlog de reposición)
"""

from .router import router as backlog_router
from .service import BacklogService
from .repository import BacklogRepository

__all__ = [
    "backlog_router",
    "BacklogService",
    "BacklogRepository"
]
