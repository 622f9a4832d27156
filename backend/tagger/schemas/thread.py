"""
Image Tagger Backend — Thread Schemas
=======================================

What:  The Thread record (a positioned comment) and its request bodies.

Coordinates:
    x and y are percentages of the image's width and height, in [0, 100].
    Request bodies keep them as `Any` so the thread service, not Pydantic,
    decides what counts as a coordinate and reports it as a 400.
"""

from typing import Any

from pydantic import BaseModel, Field

from tagger.schemas.base import RecordSchema


class Thread(RecordSchema):
    """A comment pinned to a point on an image."""
    id: str = Field(description="ULID, sortable by creation time")
    image_id: str = Field(description="Image this thread is pinned to")
    x: float = Field(ge=0, le=100, description="Horizontal position, percent of image width")
    y: float = Field(ge=0, le=100, description="Vertical position, percent of image height")
    comment: str = Field(description="Plain-text comment (markup stripped)")
    created_by: str = Field(description="Name of the user who created the thread")


class ThreadCreateRequest(BaseModel):
    """Body of POST /images/{image_id}/threads."""
    x: Any = Field(default=None, description="Horizontal position in percent")
    y: Any = Field(default=None, description="Vertical position in percent")
    comment: Any = Field(default=None, description="Comment text; markup is stripped")


class ThreadPositionUpdate(BaseModel):
    """Body of PATCH /threads/{thread_id}. Omitted or null axes keep their value."""
    x: Any = Field(default=None, description="New horizontal position in percent")
    y: Any = Field(default=None, description="New vertical position in percent")
