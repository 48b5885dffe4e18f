import asyncio
import logging

from app.dependencies.database import SessionLocal
from app.dependencies.notifier import get_notifier
from app.services.celery_config import celery_app
from app.services.notification_service import process_wishlist_notifications

logger = logging.getLogger(__name__)


def get_worker_loop() -> asyncio.AbstractEventLoop:
    # one loop per worker process, so pooled DB connections stay usable
    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            raise RuntimeError
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop


@celery_app.task(ignore_result=True)
def process_wishlist_notifications_task(book_id: str):
    """📩 Wishlist notification run inside a Celery worker"""
    logger.info(f"✅ process_wishlist_notifications_task started for book {book_id}")

    loop = get_worker_loop()
    loop.run_until_complete(
        process_wishlist_notifications(book_id, SessionLocal, get_notifier()),
    )
