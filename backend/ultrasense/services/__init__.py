"""Services for storage, push delivery, and alerting."""
from .alerter import AlerterService, alerter_service
from .push_sender import PushSenderService, PushMessage, PushDeliveryError, push_sender_service

__all__ = [
    "AlerterService",
    "alerter_service",
    "PushSenderService",
    "PushMessage",
    "PushDeliveryError",
    "push_sender_service",
]
