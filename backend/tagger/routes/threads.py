"""
Image Tagger Backend — Thread Route Handlers
==============================================

What:  Moving and deleting individual threads.

Route Inventory:
    PATCH  /threads/{thread_id}   200 Thread | 404, 403, 400, 401
    DELETE /threads/{thread_id}   204        | 404, 403, 401

A completed drag gesture on the client sends exactly one PATCH with the
final position.
"""

from fastapi import APIRouter, Depends, Response

from tagger.middleware.auth import require_principal
from tagger.schemas import ErrorResponse, Thread, ThreadPositionUpdate, User
from tagger.services.thread_service import thread_service
from tagger.storage import Storage, get_storage

router = APIRouter(
    prefix="/threads",
    tags=["Threads"],
    dependencies=[Depends(require_principal)],
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Not the thread owner", "model": ErrorResponse},
        404: {"description": "Thread not found", "model": ErrorResponse},
    },
)


@router.patch(
    "/{thread_id}",
    response_model=Thread,
    responses={400: {"description": "Invalid coordinates", "model": ErrorResponse}},
    summary="Move a thread",
)
async def update_thread_position(
    thread_id: str,
    body: ThreadPositionUpdate,
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
) -> Thread:
    return await thread_service.update_thread_position(
        storage, principal, thread_id, x=body.x, y=body.y
    )


@router.delete(
    "/{thread_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a thread",
)
async def delete_thread(
    thread_id: str,
    principal: User = Depends(require_principal),
    storage: Storage = Depends(get_storage),
) -> Response:
    await thread_service.delete_thread(storage, principal, thread_id)
    return Response(status_code=204)
