# app/modules/receivables/repository.py
from typing import List, Optional, Dict, Any
from datetime import date
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.shared.database.models import AccountsReceivable

class ReceivablesRepository:

    def __init__(self, db: Session):
        self.db = db

    def create_many(self, receivables_data: List[Dict[str, Any]]) -> List[AccountsReceivable]:
        receivables = [AccountsReceivable(**data) for data in receivables_data]
        self.db.add_all(receivables)
        self.db.flush()
        return receivables

    def delete_for_sale(self, sale_id: int) -> int:
        return self.db.query(AccountsReceivable).filter(
            AccountsReceivable.sale_id == sale_id
        ).delete(synchronize_session=False)

    def get_by_id(self, receivable_id: int) -> Optional[AccountsReceivable]:
        return self.db.query(AccountsReceivable).filter(AccountsReceivable.id == receivable_id).first()

    def find(self, status: Optional[str] = None, customer_id: Optional[int] = None) -> List[AccountsReceivable]:
        query = self.db.query(AccountsReceivable).options(selectinload(AccountsReceivable.customer))
        if status:
            query = query.filter(AccountsReceivable.status == status)
        if customer_id:
            query = query.filter(AccountsReceivable.customer_id == customer_id)
        return query.order_by(AccountsReceivable.due_date, AccountsReceivable.installment_number).all()

    def mark_overdue(self, today: date) -> int:
        return self.db.query(AccountsReceivable).filter(
            AccountsReceivable.status == "PENDING",
            AccountsReceivable.due_date < today
        ).update({AccountsReceivable.status: "OVERDUE"}, synchronize_session=False)

    def sum_open_amount(self):
        return self.db.query(
            func.coalesce(func.sum(AccountsReceivable.amount), 0)
        ).filter(AccountsReceivable.status.in_(["PENDING", "OVERDUE"])).scalar()
