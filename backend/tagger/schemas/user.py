"""
Image Tagger Backend — User Schemas
=====================================

What:  The User record and the `{name}` body accepted by /users and /login.
"""

from typing import Any

from pydantic import BaseModel, Field

from tagger.schemas.base import RecordSchema


class User(RecordSchema):
    """
    A registered user.

    `name` is unique (exact, case-sensitive), immutable, and doubles as the
    credential sent in the identity header.
    """
    id: str = Field(description="ULID, sortable by creation time")
    name: str = Field(description="Unique display name")


class NameRequest(BaseModel):
    """
    Body of POST /users and POST /login.

    `name` is typed loosely on purpose: type and emptiness checks happen in the
    identity service so they produce the API's own 400 messages.
    """
    name: Any = Field(default=None, description="Display name")
