from datetime import datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from app.models.book import BookStatus


def to_camel(string: str) -> str:
    """snake_case → camelCase"""
    return "".join(
        word.capitalize() if i else word for i, word in enumerate(string.split("_"))
    )


# Base schema with automatic camelCase aliases
class BaseSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


def validate_published_year(year: Optional[int]) -> Optional[int]:
    if year is None:
        return year
    if year < 1000:
        raise ValueError("Published year must be a valid year")
    if year > datetime.now().year:
        raise ValueError("Published year cannot be in the future")
    return year


class BookBase(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: str = Field(..., min_length=1, max_length=32)
    published_year: int


class BookCreate(BookBase):
    availability_status: BookStatus = BookStatus.AVAILABLE

    @field_validator("published_year")
    @classmethod
    def check_year(cls, year: int):
        return validate_published_year(year)


class BookUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    isbn: Optional[str] = Field(None, min_length=1, max_length=32)
    published_year: Optional[int] = None
    availability_status: Optional[BookStatus] = None

    @field_validator("published_year")
    @classmethod
    def check_year(cls, year: Optional[int]):
        return validate_published_year(year)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_unset=True, exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class BookResponse(BookBase):
    id: str
    availability_status: BookStatus
    created_at: datetime
    updated_at: datetime


class BookSummary(BaseSchema):
    """Book fields shown next to a wishlist entry."""

    id: str
    title: str
    author: str
    isbn: str
    published_year: int
    availability_status: BookStatus


class UserBase(BaseSchema):
    user_id: str = Field(..., min_length=1, max_length=100)
    user_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, email: str):
        return email.lower()


class UserCreate(UserBase):
    pass


class UserUpdate(BaseSchema):
    user_id: Optional[str] = Field(None, min_length=1, max_length=100)
    user_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, email: Optional[str]):
        return email.lower() if email else email

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_unset=True, exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class UserResponse(UserBase):
    id: str
    created_at: datetime
    updated_at: datetime


class WishlistAddRequest(BaseSchema):
    user_id: str = Field(..., min_length=1)
    book_id: str = Field(..., min_length=1)


class WishlistItemResponse(BaseSchema):
    id: str
    user_id: str
    book_id: str
    book: Optional[BookSummary] = None
    created_at: datetime
    updated_at: datetime


class Pagination(BaseSchema):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool
