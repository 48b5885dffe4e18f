from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.filters import apply_wishlist_filters
from app.models.wishlist import Wishlist


async def list_wishlist_entries_for_book(db: AsyncSession, book_id: str) -> list[Wishlist]:
    # entries are hard-deleted, so there is no soft-delete filter here
    result = await db.execute(select(Wishlist).where(Wishlist.book_id == str(book_id)))
    return list(result.scalars().all())


async def get_wishlist_entry(
    db: AsyncSession,
    user_id: str,
    book_id: str,
) -> Optional[Wishlist]:
    return await db.scalar(
        select(Wishlist).where(
            Wishlist.user_id == user_id,
            Wishlist.book_id == book_id,
        ),
    )


async def list_user_wishlist(db: AsyncSession, user_id: str) -> list[Wishlist]:
    result = await db.execute(
        select(Wishlist)
        .where(Wishlist.user_id == user_id)
        .order_by(Wishlist.created_at.desc()),
    )
    return list(result.scalars().all())


async def get_filtered_wishlists(
    db: AsyncSession,
    filters: dict,
    page: int,
    per_page: int,
) -> tuple[int, list[Wishlist]]:
    stmt = apply_wishlist_filters(select(Wishlist), **filters)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.order_by(Wishlist.created_at.desc())
        .limit(per_page)
        .offset((page - 1) * per_page),
    )
    return total, list(result.scalars().all())
