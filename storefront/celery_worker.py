# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    STOCK_SYNC_INTERVAL_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# import tasks explicitly so celery registers them
celery_app.conf.imports = (
    "storefront.tasks.stock_sync",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "sync-product-stock": {
        "task": "storefront.tasks.stock_sync.sync_all_product_stock_task",
        "schedule": float(STOCK_SYNC_INTERVAL_SECONDS),
    },
}

celery_app.conf.timezone = "UTC"
