import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, select


def generate_id() -> str:
    return str(uuid.uuid4())


class RecordMixin:
    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=False,
    )


class SoftDeleteMixin:
    """Marks rows as deleted instead of removing them.

    Every read that goes through ``active()`` skips rows with ``deleted_at`` set.
    """

    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = datetime.now()

    def restore(self):
        self.deleted_at = None

    @classmethod
    def active(cls, *conditions):
        return select(cls).where(cls.deleted_at.is_(None), *conditions)
