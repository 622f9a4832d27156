"""
Image Tagger Backend — Image ORM Model
========================================

What:  Row type for the `images` table (SQL storage backend only).
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tagger.database import Base


class ImageRow(Base):
    """An external image reference and the name of the user who generated it."""

    __tablename__ = "images"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<ImageRow(id={self.id}, created_by='{self.created_by}')>"
