import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.dependencies.database import get_db, get_session_factory
from app.dependencies.notifier import get_notifier
from app.exceptions.pagination import paginate_response
from app.exceptions.serialization import envelope, serialize_book
from app.models.book import Book
from app.schemas.schemas import BookCreate, BookUpdate, validate_published_year
from app.services.books_service import (
    get_active_book,
    get_active_book_by_isbn,
    get_filtered_books,
    search_books,
)
from app.services.notification_trigger import trigger_wishlist_notifications
from app.utils import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])

DUPLICATE_ISBN = "Book with this ISBN already exists"


async def get_book_or_404(db: AsyncSession, book_id: str) -> Book:
    book = await get_active_book(db, parse_object_id(book_id, "book"))
    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return book


async def commit_book(db: AsyncSession, book: Book):
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_ISBN)
    await db.refresh(book)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_book(book_data: BookCreate, db: AsyncSession = Depends(get_db)):
    if await get_active_book_by_isbn(db, book_data.isbn):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_ISBN)

    new_book = Book(**book_data.model_dump())
    db.add(new_book)
    await commit_book(db, new_book)

    logger.info(f"📚 Book created: {new_book.title} ({new_book.id})")
    return envelope("Book created successfully", serialize_book(new_book))


@router.get("", status_code=status.HTTP_200_OK)
async def list_books(
    db: AsyncSession = Depends(get_db),
    author: Optional[str] = None,
    published_year: Optional[int] = Query(None, alias="publishedYear"),
    page: int = Query(1, ge=1, description="Page number, starting from 1"),
    limit: int = Query(10, ge=1, le=100, description="Books per page (1-100)"),
):
    if published_year is not None:
        try:
            validate_published_year(published_year)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    filters = {"author": author, "published_year": published_year}
    total, books = await get_filtered_books(db, filters, page, limit)

    return envelope(
        "Books retrieved successfully",
        {
            "books": [serialize_book(book) for book in books],
            "pagination": paginate_response(total, page, limit),
        },
    )


@router.get("/search", status_code=status.HTTP_200_OK)
async def search_books_route(
    db: AsyncSession = Depends(get_db),
    query: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """🔍 Case-insensitive partial match on title or author."""
    query = query.strip()
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required",
        )

    total, books = await search_books(db, query, page, limit)

    return envelope(
        "Search completed successfully",
        {
            "books": [serialize_book(book) for book in books],
            "query": query,
            "pagination": paginate_response(total, page, limit),
        },
    )


@router.get("/{book_id}", status_code=status.HTTP_200_OK)
async def get_book(book_id: str, db: AsyncSession = Depends(get_db)):
    book = await get_book_or_404(db, book_id)
    return envelope("Book retrieved successfully", serialize_book(book))


@router.put("/{book_id}", status_code=status.HTTP_200_OK)
async def update_book(
    book_id: str,
    book_data: BookUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    notifier=Depends(get_notifier),
):
    """✏️ Partial update. A Borrowed → Available change notifies wishlisted users."""
    book = await get_book_or_404(db, book_id)
    changes = book_data.model_dump(exclude_unset=True, exclude_none=True)

    if "isbn" in changes and changes["isbn"] != book.isbn:
        if await get_active_book_by_isbn(db, changes["isbn"], exclude_id=book.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_ISBN)

    # must be captured before the update is applied
    previous_status = book.availability_status
    new_status = changes.get("availability_status")

    for key, value in changes.items():
        setattr(book, key, value)
    await commit_book(db, book)

    trigger_wishlist_notifications(
        background_tasks,
        previous_status,
        new_status,
        book.id,
        session_factory,
        notifier,
    )

    return envelope("Book updated successfully", serialize_book(book))


@router.delete("/{book_id}", status_code=status.HTTP_200_OK)
async def delete_book(book_id: str, db: AsyncSession = Depends(get_db)):
    """🗑 Soft delete: the book disappears from reads but stays in the table."""
    book = await get_book_or_404(db, book_id)
    book.soft_delete()
    await db.commit()

    logger.info(f"🗑 Book soft-deleted: {book.id}")
    return envelope("Book deleted successfully")
