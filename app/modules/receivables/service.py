# app/modules/receivables/service.py
import logging
from datetime import date
from decimal import Decimal
from typing import List, NamedTuple, Optional
from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.shared.database.models import AccountsReceivable
from app.shared.pricing import CENT, Number, to_money
from .repository import ReceivablesRepository
from .schemas import ReceivableStatus

logger = logging.getLogger(__name__)


class ScheduledInstallment(NamedTuple):
    number: int
    amount: Decimal
    due_date: date


def split_installments(total: Number, installments: int) -> List[Decimal]:
    """
    Dividir en centavos enteros: base = floor(centavos / n) y el resto va a
    la primera cuota. La suma es exactamente el total.
    """
    if installments < 1:
        raise ValidationError("El número de cuotas debe ser como mínimo 1")

    total = to_money(total)
    if total < 0:
        raise ValidationError("El total a dividir no puede ser negativo")

    cents = int(total / CENT)
    base, remainder = divmod(cents, installments)

    amounts = [base + remainder] + [base] * (installments - 1)
    return [(Decimal(amount) * CENT).quantize(CENT) for amount in amounts]


def build_schedule(
    total: Number,
    installments: int,
    reference_date: date,
    first_month: int = 0
) -> List[ScheduledInstallment]:
    """
    Cuota N vence en reference_date + (first_month + N - 1) meses.

    Cada vencimiento se calcula desde reference_date y no desde la cuota
    anterior: una venta del 31/01 con first_month=1 vence 28/02, 31/03, 30/04.
    """
    return [
        ScheduledInstallment(
            number=number,
            amount=amount,
            due_date=reference_date + relativedelta(months=first_month + number - 1)
        )
        for number, amount in enumerate(split_installments(total, installments), start=1)
    ]


class ReceivablesService:
    """
    Cuentas por cobrar: una fila por cuota de cada venta a crédito
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = ReceivablesRepository(db)

    def generate_for_sale(self, sale, payment, due_date: Optional[date] = None) -> List[AccountsReceivable]:
        """
        Crear las cuotas del pago a crédito dentro de la transacción del
        llamador (solo flush).

        Con due_date la primera cuota vence ese día; sin él, un mes después
        de la fecha de la venta.
        """
        if not sale.customer_id:
            raise ValidationError("Una venta a crédito requiere cliente")

        if due_date is not None:
            schedule = build_schedule(payment.amount, payment.installments, due_date)
        else:
            schedule = build_schedule(payment.amount, payment.installments, sale.sale_date.date(), first_month=1)
        receivables = self.repository.create_many([
            {
                "customer_id": sale.customer_id,
                "sale_id": sale.id,
                "amount": entry.amount,
                "due_date": entry.due_date,
                "status": ReceivableStatus.PENDING.value,
                "installment_number": entry.number,
                "total_installments": payment.installments,
            }
            for entry in schedule
        ])

        logger.info(f"Generadas {len(receivables)} cuotas para la venta {sale.id}")
        return receivables

    def delete_for_sale(self, sale_id: int) -> int:
        return self.repository.delete_for_sale(sale_id)

    def list_receivables(self, status: Optional[str] = None, customer_id: Optional[int] = None) -> List[AccountsReceivable]:
        if status:
            status = self._parse_status(status).value
        return self.repository.find(status=status, customer_id=customer_id)

    def update_status(self, receivable_id: int, status: str) -> AccountsReceivable:
        new_status = self._parse_status(status)

        receivable = self.repository.get_by_id(receivable_id)
        if not receivable:
            raise NotFoundError("Cuota no encontrada")

        try:
            receivable.status = new_status.value
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(receivable)
        return receivable

    def mark_overdue(self, today: Optional[date] = None) -> int:
        """Cuotas PENDING con vencimiento anterior a ``today`` pasan a OVERDUE"""
        today = today or date.today()
        try:
            updated = self.repository.mark_overdue(today)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if updated:
            logger.info(f"{updated} cuotas marcadas como vencidas al {today}")
        return updated

    def get_open_amount(self) -> Decimal:
        return to_money(self.repository.sum_open_amount() or 0)

    @staticmethod
    def _parse_status(status: str) -> ReceivableStatus:
        try:
            return ReceivableStatus((status or "").upper())
        except ValueError:
            raise ValidationError(
                "Estado inválido",
                details={"status": status, "allowed": [s.value for s in ReceivableStatus]}
            )
