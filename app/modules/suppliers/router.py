# app/modules/suppliers/router.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from .service import SuppliersService
from .schemas import SupplierCreateRequest, SupplierUpdateRequest, SupplierResponse

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])

@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier_data: SupplierCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar proveedor. Documento y nombre son únicos (409 si ya existen).
    """
    service = SuppliersService(db)
    return service.create_supplier(supplier_data)

@router.get("", response_model=List[SupplierResponse])
async def list_suppliers(db: Session = Depends(get_db)):
    service = SuppliersService(db)
    return service.list_suppliers()

@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    service = SuppliersService(db)
    return service.get_supplier(supplier_id)

@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    update_data: SupplierUpdateRequest,
    db: Session = Depends(get_db)
):
    service = SuppliersService(db)
    return service.update_supplier(supplier_id, update_data)

@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_supplier(supplier_id: int, db: Session = Depends(get_db)):
    """
    Baja lógica: el proveedor deja de listarse pero sus productos lo conservan.
    """
    service = SuppliersService(db)
    service.deactivate_supplier(supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
