"""
Image Tagger Backend — Identity Service
=========================================

What:  Registration, login lookup and the identity guard behind every
       protected endpoint.
How:   Names are trimmed and stripped of markup before they are stored or
       compared. A name is both the display name and the credential; there is
       no secret.
Who:   routes/users.py (register, login, list) and middleware/auth.py (guard).

Trust model:
    The client asserts who it is through a header and the server only checks
    that such a user exists. The guard is reached through a PrincipalResolver
    (middleware/auth.py) so a token-based resolver can replace it.
"""

import logging
from typing import Any, List, Optional

from tagger.exceptions import NotFoundError, UnauthorizedError, ValidationError
from tagger.ids import new_id
from tagger.schemas import User
from tagger.services.sanitizer import sanitize
from tagger.storage import Storage

logger = logging.getLogger(__name__)


class IdentityService:
    """
    Business logic for users.

    Stateless: every method receives the storage to work on.
    """

    @staticmethod
    def _require_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(message="Name is required", field="name")
        return name.strip()

    async def register(self, storage: Storage, name: Any) -> User:
        """
        Create a new user.

        Raises:
            ValidationError: name missing, not a string, blank, or blank once
                             markup is removed
            ConflictError:   a user with the same cleaned name exists
        """
        cleaned = sanitize(self._require_name(name)).strip()
        if not cleaned:
            raise ValidationError(message="Name is required", field="name")

        user = await storage.users.insert(User(id=new_id(), name=cleaned))
        logger.info("Registered user %s (%s)", user.name, user.id)
        return user

    async def authenticate(self, storage: Storage, name: Any) -> User:
        """
        Look up an existing user by name.

        Raises:
            ValidationError: name missing or not a string
            NotFoundError:   no user has this name once cleaned the way
                             register() cleans it
        """
        if not isinstance(name, str) or not name:
            raise ValidationError(message="Name is required", field="name")

        # nh3 escapes entities, so "Tom & Jerry" is stored as "Tom &amp; Jerry"
        user = await storage.users.find_one(name=sanitize(name.strip()).strip())
        if user is None:
            raise NotFoundError(resource="user")
        return user

    async def guard(self, storage: Storage, claimed_name: Optional[str]) -> User:
        """
        Resolve the acting principal from an identity claim.

        Raises:
            UnauthorizedError: claim absent, or no user with that exact name
        """
        if not claimed_name:
            raise UnauthorizedError(message="Missing identity header")

        user = await storage.users.find_one(name=claimed_name)
        if user is None:
            logger.warning("Rejected identity claim for unknown user %r", claimed_name)
            raise UnauthorizedError(message="User not found")
        return user

    async def list_users(self, storage: Storage) -> List[User]:
        """All users in registration order."""
        return await storage.users.list()


identity_service = IdentityService()
