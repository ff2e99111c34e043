# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        """
        Kolejkuje powiadomienie o złożeniu zamówienia.
        """
        send_order_notification_task.delay(user_id, order_id)


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    Celery task - na razie tylko loguje, kanał (email/SMS) podpina się tutaj.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} has been placed")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
