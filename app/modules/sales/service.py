# app/modules/sales/service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from app.modules.backlog import BacklogService
from app.modules.catalog import CatalogRepository
from app.modules.clients import ClientsRepository
from app.modules.notifications import NotificationService
from app.modules.receivables import ReceivablesService
from app.modules.settings import SettingsService
from app.shared.database.models import Sale
from app.shared.pricing import to_money
from .calculator import Settlement, settle_payments
from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, PaymentStatus, FulfillmentStatus, ItemFulfillmentStatus
)

logger = logging.getLogger(__name__)

CREDIT_METHOD = "credit"
NON_CANCELABLE_STATUSES = (FulfillmentStatus.fulfilled.value, FulfillmentStatus.partial.value)


class SalesService:
    """
    Registro y cancelación de ventas.

    Una venta toca stock, pagos, cuentas por cobrar y pendientes de compra;
    todo eso ocurre en la misma transacción de ``self.db``.
    """

    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.repository = SalesRepository(db)
        self.catalog = CatalogRepository(db)
        self.clients = ClientsRepository(db)
        self.settings = SettingsService(db)
        self.receivables = ReceivablesService(db)
        self.backlog = BacklogService(db)
        self.notifications = notifications or NotificationService()

    # ==================== REGISTRO DE VENTAS ====================

    def create_sale(self, sale_data: SaleCreateRequest) -> Sale:
        """
        Registrar una venta completa: stock, pagos, cuotas y pendientes de
        compra. Si cualquier paso falla no queda nada escrito.
        """
        if not sale_data.items:
            raise ValidationError("La venta debe contener al menos un item")
        if not sale_data.payments:
            raise ValidationError("La venta debe informar los pagos")
        if not sale_data.customer_id and any(p.method == CREDIT_METHOD for p in sale_data.payments):
            raise ValidationError("Una venta a crédito requiere cliente")

        # Puede sembrar la configuración por defecto (commit propio) antes de
        # tocar stock
        methods = self.settings.get_payment_methods_map()
        tiers = self.settings.get_tiers()

        try:
            sale = self._register_sale(sale_data, methods, tiers)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(sale)
        logger.info(
            f"Venta {sale.id} registrada: total {sale.total_amount}, "
            f"estado {sale.fulfillment_status}"
        )

        self._notify_low_stock(sale)
        return sale

    def _register_sale(self, sale_data: SaleCreateRequest, methods, tiers) -> Sale:
        if sale_data.customer_id and not self.clients.get_by_id(sale_data.customer_id):
            raise NotFoundError(f"Cliente {sale_data.customer_id} no encontrado")

        variants = {
            variant.id: variant
            for variant in self.catalog.get_variants_by_ids(item.variant_id for item in sale_data.items)
        }
        missing = sorted({item.variant_id for item in sale_data.items} - set(variants))
        if missing:
            raise BusinessRuleError(
                "Variación de producto no encontrada",
                details={"variant_ids": missing}
            )

        # 1. Stock: reserva atómica o backorder
        items_data = []
        subtotal = Decimal("0")
        for item in sale_data.items:
            variant = variants[item.variant_id]
            if self.catalog.reserve_stock(variant.id, item.quantity):
                item_status = ItemFulfillmentStatus.fulfilled
            else:
                self.catalog.force_decrement(variant.id, item.quantity)
                item_status = ItemFulfillmentStatus.pending_stock
                logger.info(f"Variación {variant.sku} sin stock suficiente, item en backorder")

            unit_price = to_money(variant.sale_price)
            line_subtotal = to_money(unit_price * item.quantity)
            subtotal += line_subtotal
            items_data.append({
                "variant_id": variant.id,
                "sku_at_sale": variant.sku,
                "quantity": item.quantity,
                "unit_sale_price": unit_price,
                "subtotal": line_subtotal,
                "fulfillment_status": item_status.value,
            })

        # 2. Pagos
        settlement = settle_payments(
            subtotal, sale_data.discount_percentage, sale_data.payments, tiers, methods
        )

        # 3. Venta
        all_fulfilled = all(
            item["fulfillment_status"] == ItemFulfillmentStatus.fulfilled.value for item in items_data
        )
        sale = self.repository.create_sale(
            self._build_sale_data(sale_data, settlement, all_fulfilled),
            items_data,
            [
                {
                    "method": payment.method,
                    "amount": payment.amount,
                    "installments": payment.installments,
                    "interest_rate_percentage": payment.interest_rate_percentage,
                }
                for payment in settlement.payments
            ]
        )

        # 4. Cuentas por cobrar
        for payment in sale.payments:
            if payment.method == CREDIT_METHOD:
                self.receivables.generate_for_sale(sale, payment, sale_data.due_date)

        # 5. Pendientes de compra
        pending = [item for item in sale.items if item.fulfillment_status == ItemFulfillmentStatus.pending_stock.value]
        for item in pending:
            self.backlog.create_for_item(sale, item)
        if pending:
            logger.info(f"Venta {sale.id}: {len(pending)} items enviados a pendientes de compra")

        return sale

    @staticmethod
    def _build_sale_data(sale_data: SaleCreateRequest, settlement: Settlement, all_fulfilled: bool) -> Dict[str, Any]:
        return {
            "customer_id": sale_data.customer_id,
            "subtotal_amount": settlement.subtotal,
            "discount_percentage": settlement.discount_percentage,
            "discount_amount": settlement.discount_amount,
            "interest_amount": settlement.interest_amount,
            "total_amount": settlement.total_amount,
            "payment_status": PaymentStatus.paid.value,
            "fulfillment_status": (
                FulfillmentStatus.ready_to_ship.value if all_fulfilled
                else FulfillmentStatus.awaiting_stock.value
            ),
            "notes": sale_data.notes,
        }

    def _notify_low_stock(self, sale: Sale):
        notified = set()
        for item in sale.items:
            variant = item.variant
            if variant is None or variant.id in notified or not variant.is_low_stock:
                continue
            notified.add(variant.id)
            self.notifications.notify_low_stock(variant, variant.product.name)

    # ==================== CONSULTAS ====================

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise NotFoundError(f"Venta {sale_id} no encontrada")
        return sale

    def list_sales(self, fulfillment_status: Optional[str] = None) -> List[Sale]:
        if fulfillment_status:
            try:
                fulfillment_status = FulfillmentStatus(fulfillment_status).value
            except ValueError:
                raise ValidationError(
                    "Estado de entrega inválido",
                    details={"allowed": [s.value for s in FulfillmentStatus]}
                )
        return self.repository.list_sales(fulfillment_status)

    def get_summary(self) -> Dict[str, Any]:
        """
        KPIs del panel: ventas, ingresos, descuentos, intereses, backorders,
        pendientes de compra, saldo a cobrar y variaciones con stock bajo
        """
        summary = {
            "total_sales": 0,
            "canceled_sales": 0,
            "total_revenue": Decimal("0.00"),
            "total_discount": Decimal("0.00"),
            "total_interest": Decimal("0.00"),
            "awaiting_stock_sales": 0,
        }

        for status, count, revenue, discount, interest in self.repository.get_totals_by_fulfillment_status():
            if status == FulfillmentStatus.canceled.value:
                summary["canceled_sales"] += count
                continue
            summary["total_sales"] += count
            summary["total_revenue"] += to_money(revenue)
            summary["total_discount"] += to_money(discount)
            summary["total_interest"] += to_money(interest)
            if status == FulfillmentStatus.awaiting_stock.value:
                summary["awaiting_stock_sales"] += count

        summary["open_backlog_items"] = self.backlog.count_open()
        summary["pending_receivables_amount"] = self.receivables.get_open_amount()
        summary["low_stock_variants"] = self.catalog.count_low_stock()
        return summary

    # ==================== CANCELACIÓN ====================

    def cancel_sale(self, sale_id: int) -> Sale:
        """
        Cancelar una venta aún no entregada.

        Borra sus cuotas y pendientes de compra y devuelve al stock solo lo
        que efectivamente se había descontado con stock disponible.
        """
        sale = self.get_sale(sale_id)

        if sale.fulfillment_status == FulfillmentStatus.canceled.value:
            return sale
        if sale.fulfillment_status in NON_CANCELABLE_STATUSES:
            raise BusinessRuleError(
                f"No se puede cancelar una venta con estado '{sale.fulfillment_status}'",
                details={"fulfillment_status": sale.fulfillment_status}
            )

        try:
            sale.fulfillment_status = FulfillmentStatus.canceled.value
            sale.payment_status = PaymentStatus.canceled.value
            sale.canceled_at = datetime.now()

            self.receivables.delete_for_sale(sale.id)
            self.backlog.delete_for_sale(sale.id)

            for item in sale.items:
                if item.fulfillment_status == ItemFulfillmentStatus.fulfilled.value:
                    self.catalog.increment_stock(item.variant_id, item.quantity)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(sale)
        logger.info(f"Venta {sale.id} cancelada")
        return sale
