# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Fire-and-forget customer notifications, processed by Celery.
    """

    @staticmethod
    def send_order_notification(customer_id: int, order_id: int):
        send_order_notification_task.delay(customer_id, order_id)

    @staticmethod
    def send_order_failed_notification(customer_id: int, reason: str):
        send_order_failed_notification_task.delay(customer_id, reason)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(customer_id: int, order_id: int):
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order #{order_id} placed, now Processing")
    return {"customer_id": customer_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_order_failed_notification_task")
def send_order_failed_notification_task(customer_id: int, reason: str):
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order could not be placed ({reason})")
    return {"customer_id": customer_id, "reason": reason, "status": "sent"}
