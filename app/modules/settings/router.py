# app/modules/settings/router.py
from decimal import Decimal
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.config.settings import Settings, get_settings
from .service import SettingsService
from .schemas import (
    SaleSettingsResponse, SaleSettingsUpdateRequest,
    InstallmentRuleCreateRequest, InstallmentRuleUpdateRequest, InstallmentRuleResponse,
    PaymentConditionResponse
)

router = APIRouter(prefix="/settings", tags=["Settings"])
conditions_router = APIRouter(tags=["Settings"])


def get_settings_service(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
) -> SettingsService:
    return SettingsService(db, currency=app_settings.default_currency)

# ==================== CONFIGURACIÓN GENERAL ====================

@router.get("", response_model=SaleSettingsResponse)
async def get_sale_settings(service: SettingsService = Depends(get_settings_service)):
    return service.get_settings()

@router.put("", response_model=SaleSettingsResponse)
async def update_sale_settings(
    update_data: SaleSettingsUpdateRequest,
    service: SettingsService = Depends(get_settings_service)
):
    """
    Actualizar margen por defecto y/o formas de pago (por clave)
    """
    return service.update_settings(update_data)

# ==================== TRAMOS DE PARCELAMIENTO ====================

@router.get("/installment-rules", response_model=List[InstallmentRuleResponse])
async def list_installment_rules(service: SettingsService = Depends(get_settings_service)):
    return service.list_installment_rules()

@router.post("/installment-rules", response_model=InstallmentRuleResponse, status_code=status.HTTP_201_CREATED)
async def create_installment_rule(
    rule_data: InstallmentRuleCreateRequest,
    service: SettingsService = Depends(get_settings_service)
):
    """
    Crear tramo. El valor mínimo de compra es único (409 si se repite).
    """
    return service.create_installment_rule(rule_data)

@router.put("/installment-rules/{rule_id}", response_model=InstallmentRuleResponse)
async def update_installment_rule(
    rule_id: int,
    update_data: InstallmentRuleUpdateRequest,
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_installment_rule(rule_id, update_data)

@router.delete("/installment-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_installment_rule(
    rule_id: int,
    service: SettingsService = Depends(get_settings_service)
):
    service.delete_installment_rule(rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ==================== CONDICIONES DE PAGO ====================

@conditions_router.get("/installment-conditions", response_model=List[PaymentConditionResponse])
async def get_payment_conditions(
    purchase_value: Decimal = Query(..., description="Valor de la compra"),
    service: SettingsService = Depends(get_settings_service)
):
    """
    Opciones de cuotas para mostrar al cliente antes de cerrar la venta
    """
    return service.get_payment_conditions(purchase_value)
