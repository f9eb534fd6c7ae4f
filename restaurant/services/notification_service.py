# restaurant/services/notification_service.py
from restaurant.celery_worker import celery_app
from restaurant.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def order_placed(customer_id: int | None, order_id: int, warnings: list[str]):
        send_order_placed_task.delay(customer_id, order_id, list(warnings))

    @staticmethod
    def status_changed(customer_id: int | None, order_id: int, status: str):
        send_status_changed_task.delay(customer_id, order_id, status)


@celery_app.task(name="restaurant.services.notification_service.send_order_placed_task")
def send_order_placed_task(customer_id, order_id: int, warnings: list):
    """
    Celery task - w prawdziwym systemie wyslalby email/SMS/push.
    Teraz tylko loguje.
    """
    if warnings:
        logger.info(
            f"[NOTIFICATION] Customer {customer_id}: order {order_id} placed, "
            f"unavailable items: {', '.join(warnings)}"
        )
    else:
        logger.info(f"[NOTIFICATION] Customer {customer_id}: order {order_id} placed")

    return {"customer_id": customer_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="restaurant.services.notification_service.send_status_changed_task")
def send_status_changed_task(customer_id, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order {order_id} is now {status}")

    return {"customer_id": customer_id, "order_id": order_id, "status": "sent"}
