from datetime import datetime

from fastapi import APIRouter
from pydantic import Field

from sharenote.web.deps import AppDep, MasterKeyDep
from sharenote.web.openapi import ApiModel, ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])


class SharedNoteResponse(ApiModel):
    """Shared note as stored under an alias."""

    success: bool = True
    data: str = Field(..., description="Share token, decode with the client codec")
    title: str
    created_at: datetime
    views: int = Field(..., description="View count including this request")


class SharedNoteSummary(ApiModel):
    alias: str
    title: str
    created_at: datetime
    views: int


class SharedNoteListResponse(ApiModel):
    success: bool = True
    notes: list[SharedNoteSummary]


class SuccessResponse(ApiModel):
    success: bool = True


@router.get(
    "/note/{alias}",
    summary="Get shared note",
    description=(
        "Return the token stored under the alias and count the view. The counter is updated "
        "in the background, so concurrent reads may under-count."
    ),
    operation_id="getSharedNote",
    responses={
        200: {"description": "Shared note"},
        404: {"model": ErrorResponse, "description": "Alias not found"},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
async def get_shared_note(alias: str, app: AppDep) -> SharedNoteResponse:
    record = await app.get_shared_note(alias)
    return SharedNoteResponse(data=record.token, title=record.title, created_at=record.created_at, views=record.views)


@router.delete(
    "/note/{alias}",
    summary="Delete shared note",
    description="Delete the alias. Requires the X-Master-Key header. Deleting an unknown alias succeeds.",
    operation_id="deleteSharedNote",
    responses={
        200: {"description": "Alias deleted (or was already absent)"},
        401: {"model": ErrorResponse, "description": "Missing or wrong shared secret"},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
async def delete_shared_note(alias: str, app: AppDep, master_key: MasterKeyDep) -> SuccessResponse:
    await app.delete_shared_note(master_key, alias)
    return SuccessResponse()


@router.get(
    "/list",
    summary="List shared notes",
    description="List every alias with its title, creation time and views. Requires the X-Master-Key header.",
    operation_id="listSharedNotes",
    responses={
        200: {"description": "All shared notes"},
        401: {"model": ErrorResponse, "description": "Missing or wrong shared secret"},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
async def list_shared_notes(app: AppDep, master_key: MasterKeyDep) -> SharedNoteListResponse:
    summaries = await app.list_shared_notes(master_key)
    return SharedNoteListResponse(
        notes=[
            SharedNoteSummary(alias=s.alias, title=s.title, created_at=s.created_at, views=s.views) for s in summaries
        ]
    )
