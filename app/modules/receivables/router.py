# app/modules/receivables/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from .service import ReceivablesService
from .schemas import (
    ReceivableResponse, ReceivableStatusUpdateRequest, MarkOverdueRequest, MarkOverdueResponse
)

router = APIRouter(prefix="/receivables", tags=["Receivables"])

@router.get("", response_model=List[ReceivableResponse])
async def list_receivables(
    status: Optional[str] = Query(None, description="PENDING, PAID u OVERDUE"),
    customer_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Cuotas ordenadas por vencimiento
    """
    service = ReceivablesService(db)
    return service.list_receivables(status=status, customer_id=customer_id)

@router.patch("/{receivable_id}", response_model=ReceivableResponse)
async def update_receivable_status(
    receivable_id: int,
    update_data: ReceivableStatusUpdateRequest,
    db: Session = Depends(get_db)
):
    service = ReceivablesService(db)
    return service.update_status(receivable_id, update_data.status)

@router.post("/mark-overdue", response_model=MarkOverdueResponse)
async def mark_overdue_receivables(
    request: Optional[MarkOverdueRequest] = None,
    db: Session = Depends(get_db)
):
    """
    Pasar a OVERDUE las cuotas pendientes ya vencidas
    """
    service = ReceivablesService(db)
    updated = service.mark_overdue(request.today if request else None)
    return MarkOverdueResponse(updated=updated)
