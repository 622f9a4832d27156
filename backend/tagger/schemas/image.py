"""Image Tagger Backend — Image Schema."""

from pydantic import Field

from tagger.schemas.base import RecordSchema


class Image(RecordSchema):
    """An externally hosted image that threads can be pinned to."""
    id: str = Field(description="ULID, sortable by creation time")
    url: str = Field(description="External URL of the image (immutable)")
    created_by: str = Field(description="Name of the user who generated the image")
