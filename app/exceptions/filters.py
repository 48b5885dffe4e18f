from typing import Optional

from sqlalchemy.sql import Select, or_

from app.models.book import Book
from app.models.user import User
from app.models.wishlist import Wishlist


def apply_book_filters(
    query: Select,
    author: Optional[str] = None,
    published_year: Optional[int] = None,
) -> Select:
    if author:
        query = query.where(Book.author.ilike(f"%{author}%"))
    if published_year:
        query = query.where(Book.published_year == published_year)
    return query


def apply_book_search(query: Select, query_text: str) -> Select:
    return query.where(
        or_(
            Book.title.ilike(f"%{query_text}%"),
            Book.author.ilike(f"%{query_text}%"),
        ),
    )


def apply_user_filters(
    query: Select,
    user_name: Optional[str] = None,
    email: Optional[str] = None,
) -> Select:
    if user_name:
        query = query.where(User.user_name.ilike(f"%{user_name}%"))
    if email:
        query = query.where(User.email.ilike(f"%{email}%"))
    return query


def apply_wishlist_filters(
    query: Select,
    user_id: Optional[str] = None,
    book_id: Optional[str] = None,
) -> Select:
    if user_id:
        query = query.where(Wishlist.user_id == user_id)
    if book_id:
        query = query.where(Wishlist.book_id == book_id)
    return query
