from enum import Enum as PyEnum

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, String, text

from app.dependencies.database import Base
from app.models.mixins import RecordMixin, SoftDeleteMixin


class BookStatus(str, PyEnum):
    AVAILABLE = "Available"
    BORROWED = "Borrowed"


class Book(RecordMixin, SoftDeleteMixin, Base):
    __tablename__ = "books"

    title = Column(String, nullable=False, index=True)
    author = Column(String, nullable=False, index=True)
    isbn = Column(String, nullable=False)
    published_year = Column(Integer, nullable=False)
    availability_status = Column(
        SAEnum(BookStatus, native_enum=False),
        default=BookStatus.AVAILABLE,
        nullable=False,
    )

    # ISBN is unique only among books that are not soft-deleted
    __table_args__ = (
        Index(
            "uq_books_isbn_active",
            "isbn",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
