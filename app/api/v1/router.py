# app/api/v1/router.py
from fastapi import APIRouter

from app.modules.catalog import catalog_router
from app.modules.clients import clients_router
from app.modules.suppliers import suppliers_router
from app.modules.settings import settings_router, conditions_router
from app.modules.sales import sales_router
from app.modules.receivables import receivables_router
from app.modules.backlog import backlog_router
from app.modules.scheduling import availability_router, appointments_router

# Crear router principal de la API v1
api_router = APIRouter()

# ==================== CATÁLOGO, PROVEEDORES Y CLIENTES ====================

api_router.include_router(catalog_router)
api_router.include_router(suppliers_router)
api_router.include_router(clients_router)

# ==================== VENTAS ====================

api_router.include_router(settings_router)
api_router.include_router(conditions_router)
api_router.include_router(sales_router)
api_router.include_router(receivables_router)
api_router.include_router(backlog_router)

# ==================== AGENDA ====================

api_router.include_router(availability_router)
api_router.include_router(appointments_router)


@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Boutique API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "products": "/api/v1/products",
            "suppliers": "/api/v1/suppliers",
            "clients": "/api/v1/clients",
            "settings": "/api/v1/settings",
            "installment_conditions": "/api/v1/installment-conditions",
            "sales": "/api/v1/sales",
            "receivables": "/api/v1/receivables",
            "purchase_backlog": "/api/v1/purchase-backlog",
            "availability": "/api/v1/availability",
            "appointments": "/api/v1/appointments"
        }
    }

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "Boutique API",
        "architecture": "modular_monolith"
    }
