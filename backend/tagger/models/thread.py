"""
Image Tagger Backend — Thread ORM Model
=========================================

What:  Row type for the `threads` table (SQL storage backend only).

Table Design:
    - image_id references images.id with ON DELETE CASCADE; the storage
      backend also deletes children explicitly inside the same transaction,
      because SQLite does not enforce foreign keys unless asked to.
    - Index on image_id: every thread listing filters by image.
"""

from sqlalchemy import Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tagger.database import Base


class ThreadRow(Base):
    """A comment pinned at (x, y) percent on an image."""

    __tablename__ = "threads"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    image_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("images.id", ondelete="CASCADE"),
        nullable=False,
    )
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_threads_image_id", "image_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ThreadRow(id={self.id}, image_id={self.image_id}, "
            f"x={self.x}, y={self.y})>"
        )
