"""
Módulo de Ventas

- Liquidación de pagos (descuento, tramo de interés, entrada + cuotas)
- Registro de venta en una sola transacción con stock, cuotas y pendientes
- Cancelación y KPIs

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- calculator.py: Cálculo puro de pagos
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
