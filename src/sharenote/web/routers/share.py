from fastapi import APIRouter
from pydantic import Field

from sharenote.web.deps import AppDep
from sharenote.web.openapi import ApiModel, ErrorResponse

router = APIRouter(tags=["share"])


class ShareRequest(ApiModel):
    """Request to store a share token under an alias."""

    alias: str | None = Field(None, description="Alias, 2-50 characters of [a-z0-9_-]")
    data: str | None = Field(None, description="Share token produced by the client codec")
    title: str | None = Field(None, description="Note title shown in listings")

    model_config = {
        "json_schema_extra": {
            "examples": [{"alias": "my-note", "data": "eNpTVvBQyCjNS1fILy0pKC1RBAAwBQXf", "title": "Hi"}]
        }
    }


class ShareResponse(ApiModel):
    success: bool = True
    alias: str
    url: str = Field(..., description="Relative short URL, e.g. /my-note")


class CheckAliasResponse(ApiModel):
    available: bool
    alias: str


@router.post(
    "/share",
    summary="Share a note under an alias",
    description=(
        "Store the token under the alias. An existing record for the alias is overwritten "
        "and its view counter reset. Aliases are not normalized server-side: uppercase is rejected."
    ),
    operation_id="shareNote",
    responses={
        200: {"description": "Token stored"},
        400: {"model": ErrorResponse, "description": "Missing fields or invalid alias"},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
async def share_note(request: ShareRequest, app: AppDep) -> ShareResponse:
    record = await app.share_note(request.alias, request.data, request.title)
    return ShareResponse(alias=record.alias, url=f"/{record.alias}")


@router.get(
    "/check/{alias}",
    summary="Check alias availability",
    description="Existence probe. No authentication required.",
    operation_id="checkAlias",
    responses={
        200: {"description": "Availability of the alias"},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
async def check_alias(alias: str, app: AppDep) -> CheckAliasResponse:
    return CheckAliasResponse(available=await app.check_alias(alias), alias=alias)
