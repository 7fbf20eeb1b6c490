# app/modules/backlog/service.py
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from app.modules.suppliers import SuppliersRepository
from app.shared.database.models import PurchaseBacklog
from .repository import BacklogRepository
from .schemas import BacklogStatus, BacklogStatusUpdateRequest

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BacklogStatus.awaiting_purchase: {BacklogStatus.purchase_order_sent, BacklogStatus.canceled},
    BacklogStatus.purchase_order_sent: {BacklogStatus.received, BacklogStatus.canceled},
}

OPEN_STATUSES = (BacklogStatus.awaiting_purchase.value, BacklogStatus.purchase_order_sent.value)


class BacklogService:
    """
    Pendientes de compra generados por items vendidos sin stock
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = BacklogRepository(db)
        self.suppliers = SuppliersRepository(db)

    def create_for_item(self, sale, item) -> PurchaseBacklog:
        """Una fila por item pendiente; en la transacción de la venta"""
        variant = item.variant
        return self.repository.create({
            "variant_id": item.variant_id,
            "quantity_needed": item.quantity,
            "source_sale_id": sale.id,
            "source_sale_item_id": item.id,
            "status": BacklogStatus.awaiting_purchase.value,
            "supplier_id": variant.product.supplier_id if variant is not None else None,
        })

    def delete_for_sale(self, sale_id: int) -> int:
        return self.repository.delete_for_sale(sale_id)

    def list_backlog(
        self,
        status: Optional[str] = BacklogStatus.awaiting_purchase.value,
        supplier_id: Optional[int] = None
    ) -> List[PurchaseBacklog]:
        if status:
            status = self._parse_status(status).value
        return self.repository.list_by_status(status, supplier_id)

    def count_open(self) -> int:
        return self.repository.count_by_statuses(OPEN_STATUSES)

    def update_status(self, backlog_id: int, update_data: BacklogStatusUpdateRequest) -> PurchaseBacklog:
        new_status = self._parse_status(update_data.status)

        entry = self.repository.get_by_id(backlog_id)
        if not entry:
            raise NotFoundError("Pendiente de compra no encontrado")

        current = BacklogStatus(entry.status)
        if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
            raise BusinessRuleError(
                f"Transición no permitida: {current.value} -> {new_status.value}",
                details={"from": current.value, "to": new_status.value}
            )
        if update_data.supplier_id is not None:
            supplier = self.suppliers.get_by_id(update_data.supplier_id)
            if not supplier or not supplier.is_active:
                raise NotFoundError("Proveedor no encontrado o inactivo")

        try:
            entry.status = new_status.value
            if update_data.purchase_order_ref is not None:
                entry.purchase_order_ref = update_data.purchase_order_ref
            if update_data.supplier_id is not None:
                entry.supplier_id = update_data.supplier_id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(f"Pendiente {entry.id}: {current.value} -> {new_status.value}")
        return entry

    @staticmethod
    def _parse_status(status: str) -> BacklogStatus:
        try:
            return BacklogStatus(status)
        except ValueError:
            raise ValidationError(
                "Estado de pendiente inválido",
                details={"status": status, "allowed": [s.value for s in BacklogStatus]}
            )
