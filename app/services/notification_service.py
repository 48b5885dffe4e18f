"""Wishlist notifications sent when a borrowed book becomes available again.

A run reloads everything it needs from the store, so it can be scheduled
long after the triggering update and may overlap with other runs for the
same book. Failures for one wishlist entry never stop the others, and no
error escapes the run.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.models.book import Book, BookStatus
from app.models.wishlist import Wishlist
from app.services.books_service import get_active_book
from app.services.email_service import send_wishlist_fulfillment_email
from app.services.user_service import get_active_user_by_user_id
from app.services.wishlist_service import list_wishlist_entries_for_book

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryOutcome:
    user_id: str
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class NotificationSummary:
    book_id: str
    book_title: str
    attempted: int
    succeeded: int
    failed: int

    @classmethod
    def from_outcomes(cls, book: Book, outcomes: List[EntryOutcome]) -> "NotificationSummary":
        succeeded = sum(1 for outcome in outcomes if outcome.success)
        return cls(
            book_id=book.id,
            book_title=book.title,
            attempted=len(outcomes),
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
        )


async def notify_wishlist_entry(db, book: Book, entry: Wishlist, notifier) -> EntryOutcome:
    try:
        user = await get_active_user_by_user_id(db, entry.user_id)
        if not user:
            logger.warning(f"User with userId {entry.user_id} not found, skipping notification")
            return EntryOutcome(entry.user_id, False, "user not found")

        logger.info(
            f"Notification prepared for user_id: {entry.user_id}: "
            f"Book [{book.title}] is now available.",
        )
        await send_wishlist_fulfillment_email(
            notifier,
            user.email,
            user.user_name,
            book.title,
            book.author,
        )
        logger.info(f"Email sent successfully to {user.email} for book: {book.title}")
        return EntryOutcome(entry.user_id, True)

    except Exception as e:
        logger.error(f"Failed to send notification to user_id {entry.user_id}: {e}")
        return EntryOutcome(entry.user_id, False, str(e))


def log_summary(summary: NotificationSummary):
    logger.info(
        "\n=== Notification Summary ===\n"
        f"Book: {summary.book_title} ({summary.book_id})\n"
        f"Total wishlist entries: {summary.attempted}\n"
        f"Successful notifications: {summary.succeeded}\n"
        f"Failed notifications: {summary.failed}\n"
        "============================",
    )


async def process_wishlist_notifications(
    book_id: str,
    session_factory: async_sessionmaker,
    notifier,
) -> Optional[NotificationSummary]:
    """Notify every user who wishlisted ``book_id`` that it is available.

    Returns the summary of the run, or None when the run stopped early
    (book gone, no longer available, or a store error).
    """
    try:
        async with session_factory() as db:
            book = await get_active_book(db, book_id)
            if not book:
                logger.info(f"Book with ID {book_id} not found for notification processing")
                return None

            if book.availability_status != BookStatus.AVAILABLE:
                logger.info(
                    f'Book "{book.title}" is not available '
                    f"(status: {book.availability_status.value}), skipping notifications",
                )
                return None

            entries = await list_wishlist_entries_for_book(db, book.id)
            if not entries:
                logger.info(f"No wishlist entries found for book: {book.title}")
                summary = NotificationSummary.from_outcomes(book, [])
                log_summary(summary)
                return summary

            outcomes = [
                await notify_wishlist_entry(db, book, entry, notifier) for entry in entries
            ]

        summary = NotificationSummary.from_outcomes(book, outcomes)
        log_summary(summary)
        return summary

    except Exception as e:
        logger.exception(f"❌ Error processing wishlist notifications for book {book_id}: {e}")
        return None
