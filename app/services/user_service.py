from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.filters import apply_user_filters
from app.models.user import User


async def get_active_user(db: AsyncSession, record_id: str) -> Optional[User]:
    result = await db.execute(User.active(User.id == str(record_id)))
    return result.scalar_one_or_none()


async def get_active_user_by_user_id(
    db: AsyncSession,
    user_id: str,
    exclude_id: Optional[str] = None,
) -> Optional[User]:
    """Lookup by the business key (userId), not the row id."""
    stmt = User.active(User.user_id == user_id)
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_active_user_by_email(
    db: AsyncSession,
    email: str,
    exclude_id: Optional[str] = None,
) -> Optional[User]:
    stmt = User.active(User.email == email.lower())
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_filtered_users(
    db: AsyncSession,
    filters: dict,
    page: int,
    per_page: int,
) -> tuple[int, list[User]]:
    stmt = apply_user_filters(User.active(), **filters)

    total_users = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.order_by(User.created_at.desc())
        .limit(per_page)
        .offset((page - 1) * per_page),
    )
    return total_users, list(result.scalars().all())
