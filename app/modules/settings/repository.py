# app/modules/settings/repository.py
from typing import List, Optional, Dict, Any
from decimal import Decimal
from sqlalchemy.orm import Session, selectinload

from app.shared.database.models import (
    SaleSetting, PaymentMethod, InstallmentRule, InstallmentRuleDetail
)

class SettingsRepository:
    """
    Configuración de ventas, formas de pago y tramos de parcelamiento
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== CONFIGURACIÓN GENERAL ====================

    def get_sale_setting(self) -> Optional[SaleSetting]:
        return self.db.query(SaleSetting).order_by(SaleSetting.id).first()

    def create_sale_setting(self, default_margin_percentage: Decimal) -> SaleSetting:
        setting = SaleSetting(default_margin_percentage=default_margin_percentage)
        self.db.add(setting)
        self.db.flush()
        return setting

    # ==================== FORMAS DE PAGO ====================

    def list_payment_methods(self) -> List[PaymentMethod]:
        return self.db.query(PaymentMethod).order_by(PaymentMethod.id).all()

    def get_payment_method(self, key: str) -> Optional[PaymentMethod]:
        return self.db.query(PaymentMethod).filter(PaymentMethod.key == key).first()

    def create_payment_method(self, method_data: Dict[str, Any]) -> PaymentMethod:
        method = PaymentMethod(**method_data)
        self.db.add(method)
        self.db.flush()
        return method

    # ==================== TRAMOS DE PARCELAMIENTO ====================

    def list_installment_rules(self) -> List[InstallmentRule]:
        """
        Ordenados por min_purchase_value ASC; la búsqueda de tramo depende
        de este orden.
        """
        return self.db.query(InstallmentRule).options(
            selectinload(InstallmentRule.rules)
        ).order_by(InstallmentRule.min_purchase_value.asc()).all()

    def count_installment_rules(self) -> int:
        return self.db.query(InstallmentRule).count()

    def get_installment_rule(self, rule_id: int) -> Optional[InstallmentRule]:
        return self.db.query(InstallmentRule).filter(InstallmentRule.id == rule_id).first()

    def get_rule_by_min_value(self, min_purchase_value: Decimal) -> Optional[InstallmentRule]:
        return self.db.query(InstallmentRule).filter(
            InstallmentRule.min_purchase_value == min_purchase_value
        ).first()

    def create_installment_rule(self, name: str, min_purchase_value: Decimal,
                                details: List[Dict[str, Any]]) -> InstallmentRule:
        rule = InstallmentRule(name=name, min_purchase_value=min_purchase_value)
        for detail in details:
            rule.rules.append(InstallmentRuleDetail(**detail))

        self.db.add(rule)
        self.db.flush()
        return rule

    def replace_rule_details(self, rule: InstallmentRule, details: List[Dict[str, Any]]):
        rule.rules.clear()
        # Flush the orphan deletes before inserting the same installment counts
        self.db.flush()
        for detail in details:
            rule.rules.append(InstallmentRuleDetail(**detail))
        self.db.flush()

    def delete_installment_rule(self, rule: InstallmentRule):
        self.db.delete(rule)
        self.db.flush()
