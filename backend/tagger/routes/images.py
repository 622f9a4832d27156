"""
Image Tagger Backend — Image Route Handlers
=============================================

What:  Image collection endpoints and the threads nested under an image.
How:   Every route requires a principal; handlers delegate to ContentService
       and ThreadService.

Route Inventory:
    POST   /images                      201 Image    | 401, 503
    GET    /images                      200 [Image]  | 401
    DELETE /images/{image_id}           204          | 404, 403, 401
    POST   /images/{image_id}/threads   201 Thread   | 404, 400, 401
    GET    /images/{image_id}/threads   200 [Thread] | 404, 401
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response

from tagger.middleware.auth import require_principal
from tagger.schemas import ErrorResponse, Image, Thread, ThreadCreateRequest, User
from tagger.services.content_service import content_service
from tagger.services.image_source import ImageSource
from tagger.services.thread_service import thread_service
from tagger.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/images",
    tags=["Images"],
    dependencies=[Depends(require_principal)],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
)


def get_image_source(request: Request) -> ImageSource:
    """FastAPI dependency: the image source attached to the running app."""
    return request.app.state.image_source


@router.post(
    "",
    status_code=201,
    response_model=Image,
    responses={503: {"description": "Image source unavailable", "model": ErrorResponse}},
    summary="Generate a new image",
)
async def create_image(
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
    source: ImageSource = Depends(get_image_source),
) -> Image:
    return await content_service.create_image(storage, source, principal)


@router.get("", response_model=List[Image], summary="List all images")
async def list_images(storage: Storage = Depends(get_storage)) -> List[Image]:
    return await content_service.list_images(storage)


@router.delete(
    "/{image_id}",
    status_code=204,
    response_class=Response,
    responses={
        403: {"description": "Not the image owner", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
    summary="Delete an image and all of its threads",
)
async def delete_image(
    image_id: str,
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
) -> Response:
    await content_service.delete_image(storage, principal, image_id)
    return Response(status_code=204)


@router.post(
    "/{image_id}/threads",
    status_code=201,
    response_model=Thread,
    responses={
        400: {"description": "Invalid coordinates or comment", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
    summary="Pin a comment thread on an image",
)
async def create_thread(
    image_id: str,
    body: ThreadCreateRequest,
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
) -> Thread:
    return await thread_service.create_thread(
        storage,
        principal,
        image_id=image_id,
        x=body.x,
        y=body.y,
        comment=body.comment,
    )


@router.get(
    "/{image_id}/threads",
    response_model=List[Thread],
    responses={404: {"description": "Image not found", "model": ErrorResponse}},
    summary="List the threads of an image",
)
async def list_threads(
    image_id: str,
    storage: Storage = Depends(get_storage),
) -> List[Thread]:
    return await thread_service.list_threads_for_image(storage, image_id)
