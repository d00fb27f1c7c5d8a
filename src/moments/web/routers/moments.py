from typing import Annotated

from fastapi import APIRouter, Query, Request

from moments.core.modules.moment.models import Moment, MomentCreate, MomentFilter, MomentList, MomentStatus, MomentUpdate, TagCount
from moments.web.deps import AppDep
from moments.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["moments"])

NOT_FOUND_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    404: {"model": ErrorResponse, "description": "Moment not found"},
}


@router.get(
    "/moments",
    summary="List moments",
    description="Get a page of moments, newest first. Filters are combined with AND.",
    operation_id="listMoments",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_moments(
    request: Request,
    app: AppDep,
    page_size: Annotated[int, Query(ge=1, le=100, description="Moments per page")] = 10,
    cursor: Annotated[str | None, Query(description="Cursor from a previous page")] = None,
    status: MomentStatus | None = None,
    tag: str | None = None,
    favorited: bool | None = None,
    search: Annotated[str | None, Query(description="Case-insensitive title substring")] = None,
) -> MomentList:
    moment_filter = MomentFilter(status=status, tag=tag, favorited=favorited, search=search)
    return await app.get_moments(request, page_size, cursor, moment_filter)


@router.post(
    "/moments",
    summary="Create moment",
    description="Create a moment. The title is the first 20 characters of the content.",
    operation_id="createMoment",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid moment data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_moment(data: MomentCreate, request: Request, app: AppDep) -> Moment:
    return await app.create_moment(request, data)


@router.get(
    "/moments/tags",
    summary="List tags",
    description="Every tag in use with the number of moments carrying it, most used first.",
    operation_id="listTags",
)
async def list_tags(request: Request, app: AppDep) -> list[TagCount]:
    return await app.get_tags(request)


@router.get(
    "/moments/search",
    summary="Search moments",
    description="Find moments whose title contains the query, case-insensitively.",
    operation_id="searchMoments",
    responses={400: {"model": ErrorResponse, "description": "Empty query"}},
)
async def search_moments(request: Request, app: AppDep, q: str = "") -> list[Moment]:
    return await app.search_moments(request, q)


@router.get("/moments/filter/favorited", summary="Favorited moments", operation_id="listFavoritedMoments")
async def list_favorited_moments(request: Request, app: AppDep) -> list[Moment]:
    return await app.get_favorited_moments(request)


@router.get("/moments/filter/status/{status}", summary="Moments by status", operation_id="listMomentsByStatus")
async def list_moments_by_status(status: MomentStatus, request: Request, app: AppDep) -> list[Moment]:
    return await app.get_moments_by_status(request, status)


@router.get("/moments/filter/tag/{tag}", summary="Moments by tag", operation_id="listMomentsByTag")
async def list_moments_by_tag(tag: str, request: Request, app: AppDep) -> list[Moment]:
    return await app.get_moments_by_tag(request, tag)


@router.get("/moments/{moment_id}", summary="Get moment", operation_id="getMoment", responses=NOT_FOUND_RESPONSES)
async def get_moment(moment_id: str, request: Request, app: AppDep) -> Moment:
    return await app.get_moment(request, moment_id)


@router.put(
    "/moments/{moment_id}",
    summary="Update moment",
    description="Partial update: only provided fields change.",
    operation_id="updateMoment",
    responses=NOT_FOUND_RESPONSES,
)
async def update_moment(moment_id: str, data: MomentUpdate, request: Request, app: AppDep) -> Moment:
    return await app.update_moment(request, moment_id, data)


@router.delete(
    "/moments/{moment_id}",
    summary="Delete moment",
    description="Archive a moment. It disappears from all listings.",
    operation_id="deleteMoment",
    status_code=204,
    responses=NOT_FOUND_RESPONSES,
)
async def delete_moment(moment_id: str, request: Request, app: AppDep) -> None:
    await app.delete_moment(request, moment_id)


@router.post(
    "/moments/{moment_id}/favorite",
    summary="Toggle favorite",
    operation_id="toggleFavorite",
    responses=NOT_FOUND_RESPONSES,
)
async def toggle_favorite(moment_id: str, request: Request, app: AppDep) -> Moment:
    return await app.toggle_favorite(request, moment_id)
