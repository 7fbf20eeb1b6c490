# app/shared/pricing.py
"""
Aritmética de dinero compartida por configuración y ventas.

Todo en Decimal, redondeando a centavos con ROUND_HALF_UP.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional, Tuple, Union

from app.core.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # float -> str first so 0.1 stays 0.1
    return Decimal(str(value))


def to_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def repass_interest(principal: Number, rate_percentage: Number) -> Tuple[Decimal, Decimal]:
    """
    Repasse de taxa: el cliente paga P / (1 - r/100) para que la tienda
    reciba P después de la comisión.

    Returns (total, interest), ambos en centavos.
    """
    principal = to_decimal(principal)
    rate = to_decimal(rate_percentage)

    if rate < 0 or rate >= HUNDRED:
        raise ValidationError(
            f"Tasa de interés inválida: {rate}%",
            details={"interest_rate_percentage": str(rate)}
        )

    if rate == 0:
        total = to_money(principal)
        return total, Decimal("0.00")

    total = to_money(principal / (1 - rate / HUNDRED))
    return total, total - to_money(principal)


@dataclass(frozen=True)
class Tier:
    """Tramo de parcelamiento: cuotas permitidas -> tasa (%)"""
    min_purchase_value: Decimal
    rates: Dict[int, Decimal] = field(default_factory=dict)
    name: str = ""

    def rate_for(self, installments: int) -> Optional[Decimal]:
        return self.rates.get(installments)

    @property
    def allowed_installments(self):
        return sorted(self.rates)


# Sin tramo aplicable: solo pago en una cuota, sin interés
CASH_TIER = Tier(min_purchase_value=Decimal("0"), rates={1: Decimal("0")}, name="À Vista")


def select_tier(tiers: Iterable[Tier], amount: Number) -> Optional[Tier]:
    """
    Tramo con el mayor min_purchase_value <= amount.

    Recorre en orden ascendente y corta en el primer tramo que supera el
    monto; el llamador garantiza el orden.
    """
    amount = to_decimal(amount)
    best = None
    for tier in tiers:
        if amount >= tier.min_purchase_value:
            best = tier
        else:
            break
    return best


def resolve_tier(tiers: Iterable[Tier], amount: Number) -> Tier:
    return select_tier(tiers, amount) or CASH_TIER


CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}


def format_currency(value: Number, currency: str = "BRL") -> str:
    """1234.5 -> 'R$ 1.234,50'"""
    amount = to_money(value)
    formatted = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{CURRENCY_SYMBOLS.get(currency, currency)} {formatted}"
