# app/modules/suppliers/repository.py
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session

from app.shared.database.models import Supplier

class SuppliersRepository:

    def __init__(self, db: Session):
        self.db = db

    def create(self, supplier_data: Dict[str, Any]) -> Supplier:
        supplier = Supplier(**supplier_data)
        self.db.add(supplier)
        self.db.flush()
        return supplier

    def get_by_id(self, supplier_id: int) -> Optional[Supplier]:
        return self.db.query(Supplier).filter(Supplier.id == supplier_id).first()

    def get_by_document(self, document_number: Optional[str]) -> Optional[Supplier]:
        if not document_number:
            return None
        return self.db.query(Supplier).filter(Supplier.document_number == document_number).first()

    def get_by_name(self, name: str) -> Optional[Supplier]:
        return self.db.query(Supplier).filter(Supplier.name == name).first()

    def list_suppliers(self, active_only: bool = True) -> List[Supplier]:
        query = self.db.query(Supplier)
        if active_only:
            query = query.filter(Supplier.is_active.is_(True))
        return query.order_by(Supplier.name).all()

    def update(self, supplier: Supplier, update_data: Dict[str, Any]) -> Supplier:
        for field, value in update_data.items():
            setattr(supplier, field, value)
        self.db.flush()
        return supplier
