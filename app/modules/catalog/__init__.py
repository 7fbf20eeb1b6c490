# app/modules/catalog/__init__.py
"""
Módulo de Catálogo - Productos y variaciones

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos (incluye primitivas atómicas de stock)
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as catalog_router
from .service import CatalogService
from .repository import CatalogRepository

__all__ = [
    "catalog_router",
    "CatalogService",
    "CatalogRepository"
]
