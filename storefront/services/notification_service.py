# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_confirmation(order_number: str, email: str):
        send_order_confirmation_task.delay(order_number, email)


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order_number: str, email: str):
    """
    Celery task - potwierdzenie zamowienia dla klienta.
    Na razie tylko loguje, bez dostawcy maili.
    """
    logger.info(
        f"[NOTIFICATION] {email}: zamowienie {order_number} przyjete",
        extra={"order_number": order_number},
    )
    return {"order_number": order_number, "email": email, "status": "sent"}
