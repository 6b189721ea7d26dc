"""
Contact Service — Contact SQLAlchemy Model
============================================

What:  ORM model for the contacts collection.
How:   The table name comes from settings (COLLECTION); a unique index on
       contact_name makes the storage layer the authority on name uniqueness.
Who:   Used by ContactService, create_schema() and Alembic.

Table Design:
    - id: storage-assigned integer key; internal, never returned by the API
    - contact_name: external key, looked up verbatim (case and whitespace
      sensitive); nullable because a create body may omit it
    - phone_number, message, image_url: free-form optional strings

    Every column is unbounded TEXT; the API puts no length limit on any field.
"""

from typing import Optional

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from contact_service.config import settings
from contact_service.database import Base


class Contact(Base):
    """A single contact document."""

    __tablename__ = settings.contacts_collection

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    contact_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    phone_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # NULL names are not considered equal by the index, so several nameless
    # contacts may coexist
    __table_args__ = (
        Index(f"uq_{settings.contacts_collection}_contact_name", "contact_name", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, contact_name='{self.contact_name}')>"
