import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.database import get_db
from app.exceptions.pagination import paginate_response
from app.exceptions.serialization import envelope, serialize_user
from app.models.user import User
from app.schemas.schemas import UserCreate, UserUpdate
from app.services.user_service import (
    get_active_user,
    get_active_user_by_email,
    get_active_user_by_user_id,
    get_filtered_users,
)
from app.utils import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

DUPLICATE_USER_ID = "User with this User ID already exists"
DUPLICATE_EMAIL = "User with this email already exists"


async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await get_active_user(db, parse_object_id(user_id, "user"))
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def commit_user(db: AsyncSession, user: User):
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        detail = DUPLICATE_EMAIL if "email" in str(e.orig) else DUPLICATE_USER_ID
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
    await db.refresh(user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    if await get_active_user_by_user_id(db, user_data.user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_USER_ID)

    if await get_active_user_by_email(db, user_data.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL)

    user = User(**user_data.model_dump())
    db.add(user)
    await commit_user(db, user)

    logger.info(f"🆕 User created: {user.user_id}")
    return envelope("User created successfully", serialize_user(user))


@router.get("", status_code=status.HTTP_200_OK)
async def list_users(
    db: AsyncSession = Depends(get_db),
    user_name: Optional[str] = Query(None, alias="userName"),
    email: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    filters = {"user_name": user_name, "email": email}
    total, users = await get_filtered_users(db, filters, page, limit)

    return envelope(
        "Users retrieved successfully",
        {
            "users": [serialize_user(user) for user in users],
            "pagination": paginate_response(total, page, limit),
        },
    )


@router.get("/userId/{user_id}", status_code=status.HTTP_200_OK)
async def get_user_by_user_id(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await get_active_user_by_user_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return envelope("User retrieved successfully", serialize_user(user))


@router.get("/{id}", status_code=status.HTTP_200_OK)
async def get_user(id: str, db: AsyncSession = Depends(get_db)):
    user = await get_user_or_404(db, id)
    return envelope("User retrieved successfully", serialize_user(user))


@router.put("/{id}", status_code=status.HTTP_200_OK)
async def update_user(id: str, user_data: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await get_user_or_404(db, id)
    changes = user_data.model_dump(exclude_unset=True, exclude_none=True)

    # uniqueness is re-checked only for fields that actually change
    if "user_id" in changes and changes["user_id"] != user.user_id:
        if await get_active_user_by_user_id(db, changes["user_id"], exclude_id=user.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_USER_ID)

    if "email" in changes and changes["email"] != user.email:
        if await get_active_user_by_email(db, changes["email"], exclude_id=user.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL)

    for key, value in changes.items():
        setattr(user, key, value)
    await commit_user(db, user)

    return envelope("User updated successfully", serialize_user(user))


@router.delete("/{id}", status_code=status.HTTP_200_OK)
async def delete_user(id: str, db: AsyncSession = Depends(get_db)):
    user = await get_user_or_404(db, id)
    user.soft_delete()
    await db.commit()

    logger.info(f"🗑 User soft-deleted: {user.user_id}")
    return envelope("User deleted successfully")
