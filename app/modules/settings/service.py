# app/modules/settings/service.py
import logging
from decimal import Decimal
from typing import List, Dict, Any, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BusinessRuleError, ConflictError, NotFoundError, ValidationError
)
from app.shared.database.models import PaymentMethod, InstallmentRule
from app.shared.pricing import (
    HUNDRED, Tier, format_currency, repass_interest, resolve_tier, to_decimal, to_money
)
from .repository import SettingsRepository
from .schemas import (
    SaleSettingsUpdateRequest, InstallmentRuleCreateRequest,
    InstallmentRuleUpdateRequest, InstallmentRuleDetailSchema
)

logger = logging.getLogger(__name__)

DEFAULT_MARGIN_PERCENTAGE = Decimal("30")

DEFAULT_PAYMENT_METHODS = [
    {"key": "cash", "name": "A Vista", "max_installments": 1},
    {"key": "card", "name": "Cartão", "max_installments": 12},
    {"key": "pix", "name": "Pix", "max_installments": 1},
    {"key": "credit", "name": "Prazo", "max_installments": 4},
]

DEFAULT_INSTALLMENT_RULE = {
    "name": "Regla General",
    "min_purchase_value": Decimal("0"),
    "details": [
        {"installments": 1, "interest_rate_percentage": Decimal("0")},
        {"installments": 2, "interest_rate_percentage": Decimal("5.5")},
        {"installments": 3, "interest_rate_percentage": Decimal("6.5")},
    ],
}

# Cuotas por debajo de este valor no se ofrecen
MIN_INSTALLMENT_VALUE = Decimal("1.00")


def rule_to_tier(rule: InstallmentRule) -> Tier:
    return Tier(
        min_purchase_value=to_decimal(rule.min_purchase_value),
        rates={
            detail.installments: to_decimal(detail.interest_rate_percentage)
            for detail in rule.rules
        },
        name=rule.name,
    )


class SettingsService:
    """
    Configuración de ventas: formas de pago y tramos de interés
    """

    def __init__(self, db: Session, currency: str = "BRL"):
        self.db = db
        self.currency = currency
        self.repository = SettingsRepository(db)

    # ==================== CONFIGURACIÓN GENERAL ====================

    def get_settings(self) -> Dict[str, Any]:
        """
        Configuración actual. La primera lectura crea los valores por defecto
        (formas de pago y un tramo general).
        """
        setting = self.repository.get_sale_setting()
        if setting is None:
            setting = self._seed_defaults()

        return {
            "default_margin_percentage": setting.default_margin_percentage,
            "payment_methods": self.repository.list_payment_methods(),
        }

    def _seed_defaults(self):
        try:
            setting = self.repository.create_sale_setting(DEFAULT_MARGIN_PERCENTAGE)
            for method_data in DEFAULT_PAYMENT_METHODS:
                if self.repository.get_payment_method(method_data["key"]) is None:
                    self.repository.create_payment_method(method_data)
            if self.repository.count_installment_rules() == 0:
                self.repository.create_installment_rule(**DEFAULT_INSTALLMENT_RULE)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Configuración de ventas inicializada con valores por defecto")
        return setting

    def update_settings(self, update_data: SaleSettingsUpdateRequest) -> Dict[str, Any]:
        if update_data.default_margin_percentage is not None and update_data.default_margin_percentage < 0:
            raise ValidationError("La margen de ganancia no puede ser negativa")

        self.get_settings()
        setting = self.repository.get_sale_setting()

        try:
            if update_data.default_margin_percentage is not None:
                setting.default_margin_percentage = update_data.default_margin_percentage

            for method_patch in update_data.payment_methods or []:
                method = self.repository.get_payment_method(method_patch.key.value)
                if method is None:
                    raise NotFoundError(f"Forma de pago '{method_patch.key.value}' no encontrada")
                for field, value in method_patch.model_dump(exclude={"key"}, exclude_none=True).items():
                    setattr(method, field, value)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get_settings()

    # ==================== FORMAS DE PAGO ====================

    def get_payment_methods_map(self) -> Dict[str, PaymentMethod]:
        self.get_settings()
        return {method.key: method for method in self.repository.list_payment_methods()}

    def get_payment_method(self, key: str) -> PaymentMethod:
        method = self.get_payment_methods_map().get(key)
        if not method or not method.is_active:
            raise BusinessRuleError(
                f"Forma de pago '{key}' no es válida o está inactiva",
                details={"method": key}
            )
        return method

    # ==================== TRAMOS DE PARCELAMIENTO ====================

    def list_installment_rules(self) -> List[InstallmentRule]:
        self.get_settings()
        return self.repository.list_installment_rules()

    def get_tiers(self) -> List[Tier]:
        """Tramos ordenados ascendentemente, listos para select_tier"""
        return [rule_to_tier(rule) for rule in self.repository.list_installment_rules()]

    def _validate_min_purchase_value(self, value: Decimal):
        if value is None or value < 0:
            raise ValidationError("El valor mínimo de compra debe ser mayor o igual a cero")

    def _validate_rule_details(self, rules: List[InstallmentRuleDetailSchema]) -> List[Dict[str, Any]]:
        """
        Al menos una opción, cuotas >= 1 y únicas, tasa en [0, 100).
        Devuelve las opciones ordenadas por número de cuotas.
        """
        if not rules:
            raise ValidationError("La regla de parcelamiento debe tener al menos una opción de cuota")

        seen = set()
        for rule in rules:
            if rule.installments < 1:
                raise ValidationError("El número de cuotas debe ser como mínimo 1")
            if rule.interest_rate_percentage < 0 or rule.interest_rate_percentage >= HUNDRED:
                raise ValidationError("La tasa de interés debe estar entre 0 y 100")
            if rule.installments in seen:
                raise ValidationError(
                    f"El número de cuotas {rule.installments} está duplicado en la misma regla"
                )
            seen.add(rule.installments)

        return [
            {"installments": rule.installments, "interest_rate_percentage": rule.interest_rate_percentage}
            for rule in sorted(rules, key=lambda r: r.installments)
        ]

    def _ensure_unique_min_value(self, value: Decimal, exclude_id: Optional[int] = None):
        existing = self.repository.get_rule_by_min_value(value)
        if existing and existing.id != exclude_id:
            raise ConflictError(f"Ya existe una regla para el valor mínimo {value}")

    def create_installment_rule(self, rule_data: InstallmentRuleCreateRequest) -> InstallmentRule:
        self._validate_min_purchase_value(rule_data.min_purchase_value)
        details = self._validate_rule_details(rule_data.rules)
        self.get_settings()
        self._ensure_unique_min_value(rule_data.min_purchase_value)

        try:
            rule = self.repository.create_installment_rule(
                name=rule_data.name,
                min_purchase_value=rule_data.min_purchase_value,
                details=details
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(rule)
        logger.info(f"Regla de parcelamiento creada desde {rule.min_purchase_value}")
        return rule

    def update_installment_rule(self, rule_id: int, update_data: InstallmentRuleUpdateRequest) -> InstallmentRule:
        rule = self.repository.get_installment_rule(rule_id)
        if not rule:
            raise NotFoundError("Regla de parcelamiento no encontrada")

        details = None
        if update_data.min_purchase_value is not None:
            self._validate_min_purchase_value(update_data.min_purchase_value)
            self._ensure_unique_min_value(update_data.min_purchase_value, exclude_id=rule.id)
        if update_data.rules is not None:
            details = self._validate_rule_details(update_data.rules)

        try:
            if update_data.name is not None:
                rule.name = update_data.name
            if update_data.min_purchase_value is not None:
                rule.min_purchase_value = update_data.min_purchase_value
            if details is not None:
                self.repository.replace_rule_details(rule, details)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(rule)
        return rule

    def delete_installment_rule(self, rule_id: int):
        rule = self.repository.get_installment_rule(rule_id)
        if not rule:
            raise NotFoundError("Regla de parcelamiento no encontrada")

        try:
            self.repository.delete_installment_rule(rule)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ==================== CONDICIONES DE PAGO ====================

    def get_payment_conditions(self, purchase_value: Decimal) -> List[Dict[str, Any]]:
        """
        Opciones de parcelamiento para un valor de compra, con la tasa del
        tramo repasada al cliente.
        """
        purchase_value = to_decimal(purchase_value)
        if purchase_value <= 0:
            raise ValidationError("El valor de la compra debe ser un número positivo")

        self.get_settings()
        tier = resolve_tier(self.get_tiers(), purchase_value)

        conditions = []
        for installments in tier.allowed_installments:
            rate = tier.rate_for(installments)
            total, _ = repass_interest(purchase_value, rate)
            installment_value = to_money(total / installments)

            if installments == 1 and rate == 0:
                description = "Al contado"
            elif rate == 0:
                description = f"{installments}x de {format_currency(installment_value, self.currency)} sin interés"
            else:
                description = (
                    f"{installments}x de {format_currency(installment_value, self.currency)} "
                    f"(Total {format_currency(total, self.currency)} con {rate.normalize():f}%)"
                )

            if installment_value < MIN_INSTALLMENT_VALUE:
                continue

            conditions.append({
                "installments": installments,
                "value": installment_value,
                "total_value": total,
                "interest_rate": rate,
                "description": description,
            })

        return conditions
