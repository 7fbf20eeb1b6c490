# app/modules/backlog/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from .service import BacklogService
from .schemas import BacklogResponse, BacklogStatusUpdateRequest

router = APIRouter(prefix="/purchase-backlog", tags=["Purchase Backlog"])

@router.get("", response_model=List[BacklogResponse])
async def list_purchase_backlog(
    status: Optional[str] = Query("awaiting_purchase", description="Filtro por estado"),
    supplier_id: Optional[int] = Query(None, description="Filtro por proveedor"),
    db: Session = Depends(get_db)
):
    """
    Pendientes de compra, los más antiguos primero. Con supplier_id se
    obtiene lo que hay que pedir a un proveedor
    """
    service = BacklogService(db)
    return service.list_backlog(status, supplier_id)

@router.patch("/{backlog_id}", response_model=BacklogResponse)
async def update_purchase_backlog(
    backlog_id: int,
    update_data: BacklogStatusUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    awaiting_purchase -> purchase_order_sent | canceled;
    purchase_order_sent -> received | canceled
    """
    service = BacklogService(db)
    return service.update_status(backlog_id, update_data)
