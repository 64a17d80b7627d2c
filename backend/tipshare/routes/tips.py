"""
TipShare Backend: Tip Route Handlers
======================================

What:  GET/POST/PUT/DELETE /tips. Every route requires a bearer token.
How:   The caller's identity comes from get_current_identity; the handlers
       pass its user id to TipService, which enforces ownership.

Route summary:
    GET    /tips   → 200 {results: [...], currentUserId}
    POST   /tips   → 201 {id, success}
    PUT    /tips   → 200 {success}   | 404 "Tip not found or not yours"
    DELETE /tips   → 200 {success}   | 404 "Tip not found or not yours"

Update and delete take the tip id in the JSON body, as the browser
client sends it.
"""

import logging

from fastapi import APIRouter, Depends

from tipshare.dependencies import get_current_identity, get_tip_service
from tipshare.exceptions import NotFoundError
from tipshare.schemas.common import ErrorResponse
from tipshare.schemas.tip import (
    SuccessResponse,
    TipCreatedResponse,
    TipCreateRequest,
    TipDeleteRequest,
    TipListResponse,
    TipUpdateRequest,
)
from tipshare.security import Identity
from tipshare.services.tip_service import TipService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tips", tags=["Tips"])

_AUTH_ERRORS = {
    401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
}
_NOT_OWNED = {
    404: {"description": "Tip not found or not yours", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=TipListResponse,
    responses=_AUTH_ERRORS,
    summary="List every tip with its author",
)
async def list_tips(
    identity: Identity = Depends(get_current_identity),
    service: TipService = Depends(get_tip_service),
) -> TipListResponse:
    results = await service.list_feed()
    return TipListResponse(results=results, current_user_id=identity.user_id)


@router.post(
    "",
    status_code=201,
    response_model=TipCreatedResponse,
    responses={**_AUTH_ERRORS, 400: {"description": "title is required", "model": ErrorResponse}},
    summary="Create a tip owned by the caller",
)
async def create_tip(
    body: TipCreateRequest,
    identity: Identity = Depends(get_current_identity),
    service: TipService = Depends(get_tip_service),
) -> TipCreatedResponse:
    tip_id = await service.create_tip(title=body.title, user_id=identity.user_id)
    return TipCreatedResponse(id=tip_id)


@router.put(
    "",
    response_model=SuccessResponse,
    responses={**_AUTH_ERRORS, **_NOT_OWNED},
    summary="Rename one of the caller's tips",
)
async def update_tip(
    body: TipUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: TipService = Depends(get_tip_service),
) -> SuccessResponse:
    updated = await service.update_tip(
        tip_id=body.id,
        title=body.title,
        user_id=identity.user_id,
    )
    if not updated:
        raise NotFoundError(context={"tip_id": body.id, "user_id": identity.user_id})
    return SuccessResponse(success="Tip updated successfully")


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={**_AUTH_ERRORS, **_NOT_OWNED},
    summary="Delete one of the caller's tips",
)
async def delete_tip(
    body: TipDeleteRequest,
    identity: Identity = Depends(get_current_identity),
    service: TipService = Depends(get_tip_service),
) -> SuccessResponse:
    deleted = await service.delete_tip(tip_id=body.id, user_id=identity.user_id)
    if not deleted:
        raise NotFoundError(context={"tip_id": body.id, "user_id": identity.user_id})
    return SuccessResponse(success="Tip deleted successfully")
