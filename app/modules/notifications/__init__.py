"""
Módulo de Notificaciones - avisos a administradores (tópico admin_notifications)
"""

from .service import (
    NotificationService, LoggingNotificationSender, ADMIN_NOTIFICATION_TOPIC, get_notification_service
)

__all__ = [
    "NotificationService",
    "LoggingNotificationSender",
    "ADMIN_NOTIFICATION_TOPIC",
    "get_notification_service"
]
