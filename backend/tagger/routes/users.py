"""
Image Tagger Backend — User Route Handlers
============================================

What:  POST /users (register), POST /login, GET /users.
How:   Thin handlers: pull the body, call IdentityService, pick the status code.
Who:   The login screen (register/login) and any client listing users.

Status codes:
    POST /users   201 User            | 400 empty or duplicate name
    POST /login   200 {message, user} | 400 missing name, 401 unknown user
    GET  /users   200 [User]          | 401
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from tagger.exceptions import NotFoundError, UnauthorizedError
from tagger.middleware.auth import require_principal
from tagger.schemas import ErrorResponse, LoginResponse, NameRequest, User
from tagger.services.identity_service import identity_service
from tagger.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    status_code=201,
    response_model=User,
    responses={400: {"description": "Empty or duplicate name", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register_user(
    body: NameRequest,
    storage: Storage = Depends(get_storage),
) -> User:
    """Create a user; the cleaned name becomes the identity credential."""
    return await identity_service.register(storage, body.name)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing name", "model": ErrorResponse},
        401: {"description": "Unknown user", "model": ErrorResponse},
    },
    summary="Log in as an existing user",
)
async def login(
    body: NameRequest,
    storage: Storage = Depends(get_storage),
) -> LoginResponse:
    """
    Look the user up by name.

    An unknown name is a failed login (401), not a missing resource (404).
    """
    try:
        user = await identity_service.authenticate(storage, body.name)
    except NotFoundError:
        raise UnauthorizedError(message="User not found")
    logger.info("User %s logged in", user.name)
    return LoginResponse(message="Login successful", user=user)


@router.get(
    "/users",
    response_model=List[User],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
) -> List[User]:
    return await identity_service.list_users(storage)
