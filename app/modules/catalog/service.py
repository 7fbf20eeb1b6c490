# app/modules/catalog/service.py
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.modules.suppliers import SuppliersRepository
from app.shared.database.models import Product, ProductVariant
from .repository import CatalogRepository
from .schemas import ProductCreateRequest, VariantPriceUpdateRequest, StockAdjustmentRequest

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Productos, variaciones e historial de precios
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = CatalogRepository(db)
        self.suppliers = SuppliersRepository(db)

    def create_product(self, product_data: ProductCreateRequest) -> Product:
        skus = [variant.sku for variant in product_data.variants]
        if product_data.supplier_id is not None:
            supplier = self.suppliers.get_by_id(product_data.supplier_id)
            if not supplier or not supplier.is_active:
                raise NotFoundError("Proveedor no encontrado o inactivo")

        existing = self.repository.get_existing_skus(skus)
        if existing:
            raise ConflictError(
                f"SKU ya registrado: {', '.join(existing)}",
                details={"skus": existing}
            )

        try:
            product = self.repository.create_product(
                product_data.model_dump(exclude={"variants"}),
                [variant.model_dump() for variant in product_data.variants]
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(product)
        logger.info(f"Producto {product.id} creado con {len(product.variants)} variaciones")
        return product

    def get_product(self, product_id: int) -> Product:
        product = self.repository.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("Producto no encontrado")
        return product

    def list_products(self, active_only: bool = True) -> List[Product]:
        return self.repository.list_products(active_only)

    def get_variant(self, variant_id: int) -> ProductVariant:
        variant = self.repository.get_variant_by_id(variant_id)
        if not variant:
            raise NotFoundError("Variación de producto no encontrada")
        return variant

    def update_variant_prices(self, variant_id: int, prices: VariantPriceUpdateRequest) -> ProductVariant:
        """
        Cambiar precios de una variación.

        El historial guarda los precios ANTERIORES; si no hay cambio no se
        registra nada.
        """
        variant = self.get_variant(variant_id)

        if variant.buy_price == prices.buy_price and variant.sale_price == prices.sale_price:
            return variant

        try:
            self.repository.add_price_history(variant, variant.buy_price, variant.sale_price)
            variant.buy_price = prices.buy_price
            variant.sale_price = prices.sale_price
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(variant)
        return variant

    def adjust_stock(self, variant_id: int, adjustment: StockAdjustmentRequest) -> ProductVariant:
        variant = self.get_variant(variant_id)

        try:
            self.repository.increment_stock(variant.id, adjustment.delta)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(variant)
        logger.info(
            f"Ajuste de stock {variant.sku}: {adjustment.delta:+d} -> {variant.quantity}"
            f" ({adjustment.reason or 'sin motivo'})"
        )
        return variant

    def list_low_stock(self) -> List[ProductVariant]:
        return self.repository.list_low_stock()
