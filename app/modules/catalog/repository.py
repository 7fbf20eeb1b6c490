# app/modules/catalog/repository.py
from typing import List, Optional, Dict, Any, Iterable
from decimal import Decimal
from datetime import datetime
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.shared.database.models import Product, ProductVariant, PriceHistory

class CatalogRepository:
    """
    Acceso a datos de productos y variaciones.

    Los métodos solo hacen flush; el commit lo decide el servicio para que
    una venta completa quede en una sola transacción.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== PRODUCTOS ====================

    def create_product(self, product_data: Dict[str, Any], variants_data: List[Dict[str, Any]]) -> Product:
        product = Product(**product_data)
        for variant_data in variants_data:
            product.variants.append(ProductVariant(**variant_data))

        self.db.add(product)
        self.db.flush()
        return product

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).options(
            selectinload(Product.variants)
        ).filter(Product.id == product_id).first()

    def list_products(self, active_only: bool = True) -> List[Product]:
        query = self.db.query(Product).options(selectinload(Product.variants))
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.order_by(Product.name).all()

    # ==================== VARIACIONES ====================

    def get_variant_by_id(self, variant_id: int) -> Optional[ProductVariant]:
        return self.db.query(ProductVariant).filter(ProductVariant.id == variant_id).first()

    def get_variants_by_ids(self, variant_ids: Iterable[int]) -> List[ProductVariant]:
        ids = list(set(variant_ids))
        if not ids:
            return []
        return self.db.query(ProductVariant).options(
            selectinload(ProductVariant.product)
        ).filter(ProductVariant.id.in_(ids)).all()

    def get_existing_skus(self, skus: Iterable[str]) -> List[str]:
        rows = self.db.query(ProductVariant.sku).filter(ProductVariant.sku.in_(list(skus))).all()
        return [row[0] for row in rows]

    def list_low_stock(self) -> List[ProductVariant]:
        return self.db.query(ProductVariant).filter(
            ProductVariant.quantity <= ProductVariant.minimum_stock
        ).order_by(ProductVariant.quantity).all()

    def count_low_stock(self) -> int:
        return self.db.query(func.count(ProductVariant.id)).filter(
            ProductVariant.quantity <= ProductVariant.minimum_stock
        ).scalar() or 0

    def add_price_history(self, variant: ProductVariant, buy_price: Decimal, sale_price: Decimal) -> PriceHistory:
        entry = PriceHistory(
            variant_id=variant.id,
            buy_price=buy_price,
            sale_price=sale_price,
            changed_at=datetime.now()
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    # ==================== STOCK ====================

    def reserve_stock(self, variant_id: int, quantity: int) -> bool:
        """
        Descontar stock solo si alcanza (UPDATE condicional atómico).
        Devuelve True si la fila se actualizó.
        """
        updated = self.db.query(ProductVariant).filter(
            ProductVariant.id == variant_id,
            ProductVariant.quantity >= quantity
        ).update(
            {ProductVariant.quantity: ProductVariant.quantity - quantity},
            synchronize_session="fetch"
        )
        return updated == 1

    def force_decrement(self, variant_id: int, quantity: int):
        """Descontar sin condición; el stock puede quedar negativo"""
        self.db.query(ProductVariant).filter(
            ProductVariant.id == variant_id
        ).update(
            {ProductVariant.quantity: ProductVariant.quantity - quantity},
            synchronize_session="fetch"
        )

    def increment_stock(self, variant_id: int, quantity: int):
        """Sumar unidades (negativo para ajustes a la baja)"""
        self.db.query(ProductVariant).filter(
            ProductVariant.id == variant_id
        ).update(
            {ProductVariant.quantity: ProductVariant.quantity + quantity},
            synchronize_session="fetch"
        )
