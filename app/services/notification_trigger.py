import logging
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.config import config
from app.models.book import BookStatus
from app.services.email_tasks import process_wishlist_notifications_task
from app.services.notification_service import process_wishlist_notifications

logger = logging.getLogger(__name__)


def should_trigger_notifications(
    previous_status: Optional[BookStatus],
    new_status: Optional[BookStatus],
) -> bool:
    """Only Borrowed → Available starts a notification run."""
    return previous_status == BookStatus.BORROWED and new_status == BookStatus.AVAILABLE


def submit_celery_run(book_id: str) -> bool:
    """Publish a notification run to the Celery broker.

    Runs as a background task after the response is sent. Never raises:
    a failed publish is logged and reported as False.
    """
    try:
        process_wishlist_notifications_task.delay(str(book_id))
    except Exception as e:
        logger.error(f"❌ Failed to submit wishlist notifications for book {book_id}: {e}")
        return False
    return True


def schedule_wishlist_notifications(
    background_tasks: BackgroundTasks,
    book_id: str,
    session_factory: async_sessionmaker,
    notifier,
    backend: Optional[str] = None,
) -> bool:
    """Hand a notification run off without waiting for it.

    Both backends go through ``background_tasks``; nothing runs before the
    response is sent. Never raises: a failed scheduling is logged and
    reported as False.
    """
    backend = backend or config.NOTIFICATION_BACKEND
    try:
        if backend == "celery":
            background_tasks.add_task(submit_celery_run, str(book_id))
        else:
            background_tasks.add_task(
                process_wishlist_notifications,
                str(book_id),
                session_factory,
                notifier,
            )
    except Exception as e:
        logger.error(f"❌ Failed to schedule wishlist notifications for book {book_id}: {e}")
        return False

    logger.info(f"🔔 Wishlist notifications scheduled for book {book_id} ({backend})")
    return True


def trigger_wishlist_notifications(
    background_tasks: BackgroundTasks,
    previous_status: Optional[BookStatus],
    new_status: Optional[BookStatus],
    book_id: str,
    session_factory: async_sessionmaker,
    notifier,
) -> bool:
    if not should_trigger_notifications(previous_status, new_status):
        return False
    return schedule_wishlist_notifications(
        background_tasks,
        book_id,
        session_factory,
        notifier,
    )
