from enum import StrEnum

from pydantic import BaseModel, Field


class MediaKind(StrEnum):
    IMAGE = "image"
    VIDEO = "video"

    @property
    def folder(self) -> str:
        """Subdirectory of the uploads path holding this kind of file."""
        return f"{self.value}s"


class UploadResult(BaseModel):
    """A stored upload."""

    url: str = Field(..., description="Durable URL to reference from a moment")
    filename: str = Field(..., description="Original filename")
    size: int = Field(..., description="File size in bytes", ge=0)
    width: int | None = Field(None, description="Image width in pixels")
    height: int | None = Field(None, description="Image height in pixels")
    type: MediaKind


class UploadBatch(BaseModel):
    files: list[UploadResult]
    total: int


class UploadInfo(BaseModel):
    """Upload limits exposed to the client."""

    max_file_size: int = Field(..., serialization_alias="maxFileSize", description="Maximum file size in bytes")
    allowed_image_extensions: list[str] = Field(..., serialization_alias="allowedImageExtensions")
    allowed_video_extensions: list[str] = Field(..., serialization_alias="allowedVideoExtensions")
