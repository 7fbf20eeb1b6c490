# app/modules/suppliers/service.py
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.shared.database.models import Supplier
from .repository import SuppliersRepository
from .schemas import SupplierCreateRequest, SupplierUpdateRequest

logger = logging.getLogger(__name__)


class SuppliersService:
    """
    Proveedores de productos. Nunca se borran: se desactivan.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SuppliersRepository(db)

    def create_supplier(self, supplier_data: SupplierCreateRequest) -> Supplier:
        if self.repository.get_by_document(supplier_data.document_number):
            raise ConflictError(
                f"El documento {supplier_data.document_number} ya está registrado en otro proveedor",
                details={"document_number": supplier_data.document_number}
            )
        self._check_name_available(supplier_data.name)

        try:
            supplier = self.repository.create({
                **supplier_data.model_dump(),
                "document_type": supplier_data.document_type.value,
                "is_active": True,
            })
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(supplier)
        logger.info(f"Proveedor {supplier.id} creado")
        return supplier

    def get_supplier(self, supplier_id: int) -> Supplier:
        """Proveedor activo; uno desactivado se trata como inexistente"""
        supplier = self.repository.get_by_id(supplier_id)
        if not supplier or not supplier.is_active:
            raise NotFoundError("Proveedor no encontrado o inactivo")
        return supplier

    def list_suppliers(self) -> List[Supplier]:
        return self.repository.list_suppliers(active_only=True)

    def update_supplier(self, supplier_id: int, update_data: SupplierUpdateRequest) -> Supplier:
        supplier = self.get_supplier(supplier_id)

        changes = update_data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != supplier.name:
            self._check_name_available(changes["name"])

        try:
            self.repository.update(supplier, changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(supplier)
        return supplier

    def deactivate_supplier(self, supplier_id: int) -> Supplier:
        supplier = self.get_supplier(supplier_id)

        try:
            self.repository.update(supplier, {"is_active": False})
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Proveedor {supplier_id} desactivado")
        return supplier

    def _check_name_available(self, name: str):
        if self.repository.get_by_name(name):
            raise ConflictError(
                "Ya existe un proveedor con este nombre",
                details={"name": name}
            )
