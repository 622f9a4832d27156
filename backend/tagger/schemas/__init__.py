"""
Image Tagger Backend — API Schemas
====================================

What:  Pydantic models shared by the HTTP layer, the storage backends and the
       Python client.
How:   Field names are snake_case in Python and camelCase on the wire
       (imageId, createdBy). Models accept either spelling on input.
"""

from tagger.schemas.common import ErrorResponse, HealthResponse, LoginResponse
from tagger.schemas.image import Image
from tagger.schemas.thread import Thread, ThreadCreateRequest, ThreadPositionUpdate
from tagger.schemas.user import NameRequest, User

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "Image",
    "LoginResponse",
    "NameRequest",
    "Thread",
    "ThreadCreateRequest",
    "ThreadPositionUpdate",
    "User",
]
