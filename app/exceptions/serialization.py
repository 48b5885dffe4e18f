from typing import Any, Optional

from app.models.book import Book
from app.models.user import User
from app.models.wishlist import Wishlist
from app.schemas.schemas import (
    BookResponse,
    BookSummary,
    UserResponse,
    WishlistItemResponse,
)


def envelope(message: Optional[str] = None, data: Any = None) -> dict:
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def serialize_book(book: Book) -> dict:
    return BookResponse.model_validate(book).model_dump(by_alias=True, mode="json")


def serialize_user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True, mode="json")


def serialize_wishlist_item(item: Wishlist) -> dict:
    return WishlistItemResponse(
        id=item.id,
        user_id=item.user_id,
        book_id=item.book_id,
        book=BookSummary.model_validate(item.book) if item.book else None,
        created_at=item.created_at,
        updated_at=item.updated_at,
    ).model_dump(by_alias=True, mode="json")
