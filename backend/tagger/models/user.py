"""
Image Tagger Backend — User ORM Model
=======================================

What:  Row type for the `users` table (SQL storage backend only).
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tagger.database import Base


class UserRow(Base):
    """A registered user. `name` is unique and doubles as the credential."""

    __tablename__ = "users"

    # ULID string: 26 Crockford base32 characters, sortable by creation time
    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<UserRow(id={self.id}, name='{self.name}')>"
