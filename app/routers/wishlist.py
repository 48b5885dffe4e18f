from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.database import get_db
from app.exceptions.pagination import paginate_response
from app.exceptions.serialization import envelope, serialize_wishlist_item
from app.models.wishlist import Wishlist
from app.schemas.schemas import WishlistAddRequest
from app.services.books_service import get_active_book
from app.services.user_service import get_active_user_by_user_id
from app.services.wishlist_service import (
    get_filtered_wishlists,
    get_wishlist_entry,
    list_user_wishlist,
)
from app.utils import parse_object_id

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

ALREADY_IN_WISHLIST = "Book is already in wishlist"


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(data: WishlistAddRequest, db: AsyncSession = Depends(get_db)):
    user = await get_active_user_by_user_id(db, data.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    book = await get_active_book(db, parse_object_id(data.book_id, "book"))
    if not book:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")

    if await get_wishlist_entry(db, data.user_id, book.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_IN_WISHLIST)

    entry = Wishlist(user_id=data.user_id, book=book)
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_IN_WISHLIST)

    return envelope("Book added to wishlist successfully", serialize_wishlist_item(entry))


@router.get("", status_code=status.HTTP_200_OK)
async def list_wishlists(
    db: AsyncSession = Depends(get_db),
    user_id: Optional[str] = Query(None, alias="userId"),
    book_id: Optional[str] = Query(None, alias="bookId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    if book_id:
        book_id = parse_object_id(book_id, "book")

    filters = {"user_id": user_id, "book_id": book_id}
    total, entries = await get_filtered_wishlists(db, filters, page, limit)

    return envelope(
        "Wishlists retrieved successfully",
        {
            "wishlists": [serialize_wishlist_item(entry) for entry in entries],
            "pagination": paginate_response(total, page, limit),
        },
    )


@router.get("/check", status_code=status.HTTP_200_OK)
async def check_wishlist(
    db: AsyncSession = Depends(get_db),
    user_id: Optional[str] = Query(None, alias="userId"),
    book_id: Optional[str] = Query(None, alias="bookId"),
):
    if not user_id or not book_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId and bookId are required",
        )

    entry = await get_wishlist_entry(db, user_id, parse_object_id(book_id, "book"))

    return envelope(
        data={
            "isInWishlist": entry is not None,
            "wishlist": serialize_wishlist_item(entry) if entry else None,
        },
    )


@router.get("/user/{user_id}", status_code=status.HTTP_200_OK)
async def get_user_wishlist(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await get_active_user_by_user_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    entries = await list_user_wishlist(db, user_id)

    return envelope(
        "Wishlist retrieved successfully",
        {
            "userId": user_id,
            "wishlist": [serialize_wishlist_item(entry) for entry in entries],
        },
    )


@router.delete("/user/{user_id}/book/{book_id}", status_code=status.HTTP_200_OK)
async def remove_from_wishlist(
    user_id: str,
    book_id: str,
    db: AsyncSession = Depends(get_db),
):
    entry = await get_wishlist_entry(db, user_id, parse_object_id(book_id, "book"))
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found in wishlist",
        )

    await db.delete(entry)
    await db.commit()
    return envelope("Book removed from wishlist successfully")
