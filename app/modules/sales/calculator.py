# app/modules/sales/calculator.py
"""
Liquidación de pagos de una venta: descuento, tramo de interés y división
entrada + cuotas.

Funciones puras; no tocan la base de datos.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence

from app.core.exceptions import BusinessRuleError, ValidationError
from app.shared.pricing import (
    HUNDRED, Number, Tier, repass_interest, resolve_tier, to_decimal, to_money
)

ZERO = Decimal("0.00")
MAX_PAYMENT_LEGS = 2


@dataclass
class SettledPayment:
    method: str
    amount: Decimal
    installments: int
    interest_rate_percentage: Decimal
    principal: Decimal
    interest: Decimal = ZERO


@dataclass
class Settlement:
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    net_amount: Decimal
    payments: List[SettledPayment] = field(default_factory=list)

    @property
    def interest_amount(self) -> Decimal:
        return sum((p.interest for p in self.payments), ZERO)

    @property
    def total_amount(self) -> Decimal:
        return sum((p.amount for p in self.payments), ZERO)


def clamp_discount(discount_percentage: Optional[Number]) -> Decimal:
    if discount_percentage is None:
        return Decimal("0")
    value = to_decimal(discount_percentage)
    return max(Decimal("0"), min(HUNDRED, value))


def _check_method(intent, methods: Mapping):
    method = methods.get(intent.method)
    if method is None or not method.is_active:
        raise BusinessRuleError(
            f"Forma de pago '{intent.method}' no es válida o está inactiva",
            details={"method": intent.method}
        )
    if intent.installments < 1:
        raise ValidationError("El número de cuotas debe ser como mínimo 1")
    if intent.installments > method.max_installments:
        raise BusinessRuleError(
            f"Parcelamiento en {intent.installments}x no permitido para '{intent.method}'",
            details={"method": intent.method, "max_installments": method.max_installments}
        )
    return method


def _settle_single(intent, method, net_amount: Decimal, tiers: Sequence[Tier]) -> SettledPayment:
    # Formas de pago de una sola cuota (efectivo, pix) no pasan por tramos
    if method.max_installments <= 1:
        return SettledPayment(
            method=intent.method,
            amount=net_amount,
            installments=intent.installments,
            interest_rate_percentage=ZERO,
            principal=net_amount,
        )

    tier = resolve_tier(tiers, net_amount)
    rate = tier.rate_for(intent.installments)
    if rate is None:
        raise BusinessRuleError(
            f"Parcelamiento en {intent.installments}x no permitido para esta compra",
            details={
                "installments": intent.installments,
                "allowed_installments": tier.allowed_installments,
            }
        )

    total, interest = repass_interest(net_amount, rate)
    return SettledPayment(
        method=intent.method,
        amount=total,
        installments=intent.installments,
        interest_rate_percentage=to_money(rate),
        principal=net_amount,
        interest=interest,
    )


def _settle_split(entry, rest, net_amount: Decimal) -> List[SettledPayment]:
    """
    Entrada con monto explícito + saldo en cuotas. En pagos divididos nunca
    se repasa interés.
    """
    if entry.amount is None:
        raise BusinessRuleError(
            "Pago dividido: la entrada debe informar el monto",
            details={"method": entry.method}
        )

    entry_amount = to_money(entry.amount)
    if entry_amount <= 0 or entry_amount >= net_amount:
        raise BusinessRuleError(
            "Pago dividido: la entrada debe ser mayor que cero y menor que el total",
            details={"entry_amount": str(entry_amount), "net_amount": str(net_amount)}
        )

    remainder = net_amount - entry_amount
    return [
        SettledPayment(
            method=entry.method,
            amount=entry_amount,
            installments=entry.installments,
            interest_rate_percentage=ZERO,
            principal=entry_amount,
        ),
        SettledPayment(
            method=rest.method,
            amount=remainder,
            installments=rest.installments,
            interest_rate_percentage=ZERO,
            principal=remainder,
        ),
    ]


def settle_payments(
    subtotal: Number,
    discount_percentage: Optional[Number],
    intents: Sequence,
    tiers: Sequence[Tier],
    methods: Mapping,
) -> Settlement:
    """
    Calcular los pagos de la venta.

    ``intents`` son objetos con ``method``, ``amount`` e ``installments``;
    ``tiers`` debe venir en orden ascendente de min_purchase_value;
    ``methods`` mapea la clave de la forma de pago a un objeto con
    ``is_active`` y ``max_installments``.
    """
    subtotal = to_money(subtotal)
    percentage = clamp_discount(discount_percentage)
    discount_amount = to_money(subtotal * percentage / HUNDRED)
    net_amount = subtotal - discount_amount

    if not intents:
        raise ValidationError("La venta debe informar al menos un pago")
    if len(intents) > MAX_PAYMENT_LEGS:
        raise ValidationError(f"Se permiten como máximo {MAX_PAYMENT_LEGS} formas de pago por venta")

    resolved = [_check_method(intent, methods) for intent in intents]

    if len(intents) == 1:
        payments = [_settle_single(intents[0], resolved[0], net_amount, tiers)]
    else:
        payments = _settle_split(intents[0], intents[1], net_amount)

    return Settlement(
        subtotal=subtotal,
        discount_percentage=percentage,
        discount_amount=discount_amount,
        net_amount=net_amount,
        payments=payments,
    )
