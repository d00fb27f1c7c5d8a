from fastapi import APIRouter, Request, UploadFile

from moments.core.modules.upload.models import MediaKind, UploadBatch, UploadInfo, UploadResult
from moments.web.deps import AppDep
from moments.web.openapi import ErrorResponse

router = APIRouter(tags=["upload"])

UPLOAD_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Unsupported format, too large, or invalid image"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
}


async def read_upload(file: UploadFile, max_size: int) -> tuple[str, bytes]:
    """Read at most one byte past the limit, enough for the size check to reject the file."""
    return file.filename or "unnamed", await file.read(max_size + 1)


@router.post("/upload/image", summary="Upload image", operation_id="uploadImage", responses=UPLOAD_RESPONSES)
async def upload_image(file: UploadFile, request: Request, app: AppDep) -> UploadResult:
    filename, content = await read_upload(file, app.max_upload_size)
    return await app.upload_file(request, filename, content, MediaKind.IMAGE)


@router.post(
    "/upload/images",
    summary="Upload images",
    description="Upload up to 9 images at once. Nothing is stored unless every file is valid.",
    operation_id="uploadImages",
    responses=UPLOAD_RESPONSES,
)
async def upload_images(files: list[UploadFile], request: Request, app: AppDep) -> UploadBatch:
    contents = [await read_upload(file, app.max_upload_size) for file in files]
    return await app.upload_images(request, contents)


@router.post("/upload/video", summary="Upload video", operation_id="uploadVideo", responses=UPLOAD_RESPONSES)
async def upload_video(file: UploadFile, request: Request, app: AppDep) -> UploadResult:
    filename, content = await read_upload(file, app.max_upload_size)
    return await app.upload_file(request, filename, content, MediaKind.VIDEO)


@router.get("/upload/info", summary="Upload limits", operation_id="getUploadInfo")
async def upload_info(request: Request, app: AppDep) -> UploadInfo:
    return await app.get_upload_info(request)
