# app/modules/backlog/repository.py
from typing import Iterable, List, Optional, Dict, Any
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.shared.database.models import PurchaseBacklog

class BacklogRepository:

    def __init__(self, db: Session):
        self.db = db

    def create(self, backlog_data: Dict[str, Any]) -> PurchaseBacklog:
        entry = PurchaseBacklog(**backlog_data)
        self.db.add(entry)
        self.db.flush()
        return entry

    def delete_for_sale(self, sale_id: int) -> int:
        return self.db.query(PurchaseBacklog).filter(
            PurchaseBacklog.source_sale_id == sale_id
        ).delete(synchronize_session=False)

    def get_by_id(self, backlog_id: int) -> Optional[PurchaseBacklog]:
        return self.db.query(PurchaseBacklog).filter(PurchaseBacklog.id == backlog_id).first()

    def list_by_status(self, status: Optional[str], supplier_id: Optional[int] = None) -> List[PurchaseBacklog]:
        query = self.db.query(PurchaseBacklog).options(selectinload(PurchaseBacklog.variant))
        if status:
            query = query.filter(PurchaseBacklog.status == status)
        if supplier_id is not None:
            query = query.filter(PurchaseBacklog.supplier_id == supplier_id)
        return query.order_by(PurchaseBacklog.created_at, PurchaseBacklog.id).all()

    def count_by_statuses(self, statuses: Iterable[str]) -> int:
        return self.db.query(func.count(PurchaseBacklog.id)).filter(
            PurchaseBacklog.status.in_(list(statuses))
        ).scalar() or 0
