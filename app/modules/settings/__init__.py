# app/modules/settings/__init__.py
"""
Módulo de Configuración de Ventas

- Formas de pago (activas/inactivas, máximo de cuotas)
- Tramos de parcelamiento por valor mínimo de compra
- Condiciones de pago con repasse de la tasa
"""

from .router import router as settings_router, conditions_router
from .service import SettingsService
from .repository import SettingsRepository

__all__ = [
    "settings_router",
    "conditions_router",
    "SettingsService",
    "SettingsRepository"
]
