# app/modules/notifications/service.py
"""
Avisos a los administradores de la tienda.

El envío real (push) queda detrás de un ``sender``; el que viene por defecto
solo escribe en el log.
"""
import logging
from typing import Any, Dict, Optional, Protocol

from fastapi import Request

logger = logging.getLogger(__name__)

ADMIN_NOTIFICATION_TOPIC = "admin_notifications"


class NotificationSender(Protocol):
    def send(self, topic: str, title: str, body: str, data: Dict[str, str]) -> Any:
        ...


class LoggingNotificationSender:
    def send(self, topic: str, title: str, body: str, data: Dict[str, str]) -> str:
        logger.info(f"[{topic}] {title}: {body} {data}")
        return "logged"


class NotificationService:

    def __init__(self, sender: Optional[NotificationSender] = None, topic: str = ADMIN_NOTIFICATION_TOPIC):
        self.sender = sender or LoggingNotificationSender()
        self.topic = topic

    def send_to_admins(self, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """
        Entregar el aviso al sender. Un fallo se registra y no se propaga;
        devuelve False en ese caso.
        """
        payload = {key: str(value) for key, value in (data or {}).items() if value is not None}
        try:
            response = self.sender.send(self.topic, title, body, payload)
        except Exception:
            logger.exception(f"Error enviando notificación '{title}' al tópico {self.topic}")
            return False

        logger.info(f"Notificación '{title}' enviada al tópico {self.topic} ({response})")
        return True

    def notify_new_appointment(self, appointment, client_name: str) -> bool:
        body = f"{client_name} hizo una nueva cita."
        if appointment is not None and appointment.start_time:
            body = (
                f"{client_name} agendó para el {appointment.start_time:%d/%m/%Y} "
                f"a las {appointment.start_time:%H:%M}."
            )

        return self.send_to_admins(
            "¡Nueva cita confirmada!",
            body,
            {"type": "NEW_APPOINTMENT", "appointment_id": getattr(appointment, "id", None)}
        )

    def notify_low_stock(self, variant, product_name: str) -> bool:
        return self.send_to_admins(
            "Stock bajo",
            f"{product_name} ({variant.size} / {variant.color}) tiene {variant.quantity} unidades "
            f"(mínimo {variant.minimum_stock}).",
            {"type": "LOW_STOCK", "variant_id": variant.id, "sku": variant.sku}
        )


def get_notification_service(request: Request) -> NotificationService:
    """Dependencia: la instancia que la app guarda en su estado"""
    service = getattr(request.app.state, "notifications", None)
    if service is None:
        service = NotificationService()
        request.app.state.notifications = service
    return service
