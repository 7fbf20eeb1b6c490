# app/modules/sales/repository.py
from typing import List, Optional, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.shared.database.models import Sale, SaleItem, SalePayment

class SalesRepository:
    """
    Repositorio para operaciones de datos de ventas.

    Igual que el resto de repositorios solo hace flush; el servicio hace el
    commit de toda la venta.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_sale(
        self,
        sale_data: Dict[str, Any],
        items_data: List[Dict[str, Any]],
        payments_data: List[Dict[str, Any]]
    ) -> Sale:
        """Crear venta con items y pagos; flush para obtener los ids"""
        sale = Sale(sale_date=datetime.now(), **sale_data)
        for item_data in items_data:
            sale.items.append(SaleItem(**item_data))
        for payment_data in payments_data:
            sale.payments.append(SalePayment(**payment_data))

        self.db.add(sale)
        self.db.flush()
        return sale

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).options(
            selectinload(Sale.items),
            selectinload(Sale.payments)
        ).filter(Sale.id == sale_id).first()

    def list_sales(self, fulfillment_status: Optional[str] = None) -> List[Sale]:
        query = self.db.query(Sale).options(
            selectinload(Sale.items),
            selectinload(Sale.payments)
        )
        if fulfillment_status:
            query = query.filter(Sale.fulfillment_status == fulfillment_status)
        return query.order_by(Sale.sale_date.desc(), Sale.id.desc()).all()

    def get_totals_by_fulfillment_status(self) -> List[Any]:
        """
        Una fila por estado: (estado, ventas, total, descuento, interés)
        """
        return self.db.query(
            Sale.fulfillment_status,
            func.count(Sale.id),
            func.coalesce(func.sum(Sale.total_amount), 0),
            func.coalesce(func.sum(Sale.discount_amount), 0),
            func.coalesce(func.sum(Sale.interest_amount), 0)
        ).group_by(Sale.fulfillment_status).all()
