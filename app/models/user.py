from sqlalchemy import Column, Index, String, text

from app.dependencies.database import Base
from app.models.mixins import RecordMixin, SoftDeleteMixin


class User(RecordMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=False, index=True)
    email = Column(String(255), nullable=False)

    __table_args__ = (
        Index(
            "uq_users_user_id_active",
            "user_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
