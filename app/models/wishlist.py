from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.dependencies.database import Base
from app.models.mixins import RecordMixin


class Wishlist(RecordMixin, Base):
    __tablename__ = "wishlist"

    # business key of the user (User.user_id), not the row id
    user_id = Column(String, nullable=False, index=True)
    book_id = Column(String(36), ForeignKey("books.id"), nullable=False, index=True)

    book = relationship("Book", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_wishlist_user_book"),
    )
