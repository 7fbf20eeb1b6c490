# app/modules/sales/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.modules.notifications import NotificationService, get_notification_service
from .service import SalesService
from .schemas import SaleCreateRequest, SaleResponse, SalesSummaryResponse

router = APIRouter(prefix="/sales", tags=["Sales"])


def get_sales_service(
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service)
) -> SalesService:
    return SalesService(db, notifications=notifications)

# ==================== REGISTRO DE VENTAS ====================

@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_data: SaleCreateRequest,
    service: SalesService = Depends(get_sales_service)
):
    """
    Registrar venta completa

    Incluye:
    - Descuento de stock (o backorder si no alcanza)
    - Pago único con tasa del tramo repasada, o entrada + cuotas sin interés
    - Cuotas a cobrar para pagos a crédito
    - Pendientes de compra para items sin stock
    """
    return service.create_sale(sale_data)

@router.get("", response_model=List[SaleResponse])
async def list_sales(
    fulfillment_status: Optional[str] = Query(None, description="Filtro por estado de entrega"),
    service: SalesService = Depends(get_sales_service)
):
    return service.list_sales(fulfillment_status)

@router.get("/summary", response_model=SalesSummaryResponse)
async def get_sales_summary(service: SalesService = Depends(get_sales_service)):
    """
    KPIs para el panel de administración
    """
    return service.get_summary()

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    return service.get_sale(sale_id)

@router.patch("/{sale_id}/cancel", response_model=SaleResponse)
async def cancel_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    """
    Cancelar venta no entregada: borra cuotas y pendientes, devuelve stock
    de los items que se habían descontado
    """
    return service.cancel_sale(sale_id)
