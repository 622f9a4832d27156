"""
Image Tagger Backend — Access Guard
=====================================

What:  Resolves the acting principal for protected endpoints.
How:   A PrincipalResolver turns a request into a User. The shipped
       HeaderPrincipalResolver trusts the X-User-Name header (configurable via
       AUTH_HEADER) and only checks that the user exists. Routers depend on
       `require_principal`, which stores the user on request.state.principal.
Who:   Every router except public registration/login and /health.

Swapping the trust model:
    app.dependency_overrides[get_principal_resolver] = lambda: TokenResolver()
    No route or service changes are needed.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends, Request

from tagger.config import settings
from tagger.schemas import User
from tagger.services.identity_service import identity_service
from tagger.storage import Storage, get_storage

logger = logging.getLogger(__name__)


class PrincipalResolver(ABC):
    """Turns an incoming request into the User acting on it."""

    @abstractmethod
    async def resolve(self, request: Request, storage: Storage) -> User:
        """
        Raises:
            UnauthorizedError: the request carries no valid identity
        """
        ...


class HeaderPrincipalResolver(PrincipalResolver):
    """
    Trusts a client-supplied header naming the user.

    Args:
        header_name: Header to read (default: settings.auth_header)
    """

    def __init__(self, header_name: Optional[str] = None):
        self.header_name = header_name or settings.auth_header

    async def resolve(self, request: Request, storage: Storage) -> User:
        claimed = request.headers.get(self.header_name)
        return await identity_service.guard(storage, claimed)


_default_resolver = HeaderPrincipalResolver()


def get_principal_resolver() -> PrincipalResolver:
    """FastAPI dependency returning the active resolver (override in tests)."""
    return _default_resolver


async def require_principal(
    request: Request,
    storage: Storage = Depends(get_storage),
    resolver: PrincipalResolver = Depends(get_principal_resolver),
) -> User:
    """
    FastAPI dependency guarding protected routes.

    Returns:
        The authenticated User, also bound to request.state.principal.

    Raises:
        UnauthorizedError: → 401 via the global exception handler
    """
    user = await resolver.resolve(request, storage)
    request.state.principal = user
    return user
