from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.exceptions.filters import apply_book_filters, apply_book_search
from app.models.book import Book


async def get_active_book(db: AsyncSession, book_id: str) -> Optional[Book]:
    """Book by id, ignoring soft-deleted ones. Unknown or malformed ids give None."""
    result = await db.execute(Book.active(Book.id == str(book_id)))
    return result.scalar_one_or_none()


async def get_active_book_by_isbn(
    db: AsyncSession,
    isbn: str,
    exclude_id: Optional[str] = None,
) -> Optional[Book]:
    stmt = Book.active(Book.isbn == isbn)
    if exclude_id:
        stmt = stmt.where(Book.id != exclude_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def paginate_books(
    db: AsyncSession,
    stmt: Select,
    page: int,
    per_page: int,
) -> tuple[int, list[Book]]:
    total_books = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    result = await db.execute(
        stmt.order_by(Book.created_at.desc())
        .limit(per_page)
        .offset((page - 1) * per_page),
    )
    return total_books, list(result.scalars().all())


async def get_filtered_books(
    db: AsyncSession,
    filters: dict,
    page: int,
    per_page: int,
) -> tuple[int, list[Book]]:
    stmt = apply_book_filters(Book.active(), **filters)
    return await paginate_books(db, stmt, page, per_page)


async def search_books(
    db: AsyncSession,
    query_text: str,
    page: int,
    per_page: int,
) -> tuple[int, list[Book]]:
    stmt = apply_book_search(Book.active(), query_text)
    return await paginate_books(db, stmt, page, per_page)
