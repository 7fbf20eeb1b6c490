# app/modules/catalog/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from .service import CatalogService
from .schemas import (
    ProductCreateRequest, ProductResponse, VariantResponse,
    VariantPriceUpdateRequest, StockAdjustmentRequest
)

router = APIRouter(prefix="/products", tags=["Catalog"])

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear producto con sus variaciones (talla, color, SKU, precios, stock)
    """
    service = CatalogService(db)
    return service.create_product(product_data)

@router.get("", response_model=List[ProductResponse])
async def list_products(
    active_only: bool = True,
    db: Session = Depends(get_db)
):
    service = CatalogService(db)
    return service.list_products(active_only)

@router.get("/variants/low-stock", response_model=List[VariantResponse])
async def list_low_stock_variants(db: Session = Depends(get_db)):
    """
    Variaciones con stock igual o por debajo del mínimo (incluye backorders)
    """
    service = CatalogService(db)
    return service.list_low_stock()

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: Session = Depends(get_db)):
    service = CatalogService(db)
    return service.get_product(product_id)

@router.patch("/variants/{variant_id}/prices", response_model=VariantResponse)
async def update_variant_prices(
    variant_id: int,
    prices: VariantPriceUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Actualizar precios; el precio anterior queda en el historial
    """
    service = CatalogService(db)
    return service.update_variant_prices(variant_id, prices)

@router.patch("/variants/{variant_id}/stock", response_model=VariantResponse)
async def adjust_variant_stock(
    variant_id: int,
    adjustment: StockAdjustmentRequest,
    db: Session = Depends(get_db)
):
    service = CatalogService(db)
    return service.adjust_stock(variant_id, adjustment)
