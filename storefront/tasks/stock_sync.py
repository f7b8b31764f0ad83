# storefront/tasks/stock_sync.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.inventory_service import InventoryService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.stock_sync.sync_all_product_stock_task")
def sync_all_product_stock_task():
    """
    Periodic full reconciliation of products.stock from the variant rows,
    catches whatever the post-order sync missed.
    """
    logger.info("Stock sync task started")

    db = SessionLocal()
    try:
        ok = InventoryService(db).sync_product_stock()
    finally:
        db.close()

    return {"synced": ok}
