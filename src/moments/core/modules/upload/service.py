import structlog

from moments.config import Config
from moments.core.core import Service
from moments.core.modules.upload.models import MediaKind, UploadBatch, UploadInfo, UploadResult
from moments.core.modules.upload.storage import LocalUploadSink, UploadSink, get_file_extension, read_image_size
from moments.errors import ValidationError

logger = structlog.get_logger(__name__)

MAX_BATCH_IMAGES = 9


class UploadService(Service):
    """Validates uploaded media and hands it to the upload sink."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._sink: UploadSink = LocalUploadSink(config.uploads_path)

    async def on_start(self) -> None:
        await self._sink.start()

    def get_upload_info(self) -> UploadInfo:
        return UploadInfo(
            max_file_size=self.config.max_file_size,
            allowed_image_extensions=self.config.allowed_image_extensions,
            allowed_video_extensions=self.config.allowed_video_extensions,
        )

    async def upload_file(self, filename: str, content: bytes, kind: MediaKind) -> UploadResult:
        """Validate and store a single image or video."""
        result = self._validate(filename, content, kind)
        return await self._store(result, content)

    async def upload_images(self, files: list[tuple[str, bytes]]) -> UploadBatch:
        """Store several images; nothing is stored unless every file is valid."""
        if not files:
            raise ValidationError("No files provided")
        if len(files) > MAX_BATCH_IMAGES:
            raise ValidationError(f"At most {MAX_BATCH_IMAGES} images can be uploaded at once")

        validated = [(self._validate(filename, content, MediaKind.IMAGE), content) for filename, content in files]
        stored = [await self._store(result, content) for result, content in validated]
        return UploadBatch(files=stored, total=len(stored))

    def _validate(self, filename: str, content: bytes, kind: MediaKind) -> UploadResult:
        """Check extension, size and image integrity; the returned result has no URL yet."""
        allowed = self.config.allowed_image_extensions if kind == MediaKind.IMAGE else self.config.allowed_video_extensions
        extension = get_file_extension(filename)
        if extension not in allowed:
            raise ValidationError(f"Unsupported {kind} format '{filename}', allowed: {', '.join(allowed)}")
        if not content:
            raise ValidationError(f"File '{filename}' is empty")
        if len(content) > self.config.max_file_size:
            raise ValidationError(f"File '{filename}' is too large, maximum is {self.config.max_file_size // (1024 * 1024)}MB")

        width = height = None
        if kind == MediaKind.IMAGE:
            width, height = read_image_size(content)
        return UploadResult(url="", filename=filename, size=len(content), width=width, height=height, type=kind)

    async def _store(self, result: UploadResult, content: bytes) -> UploadResult:
        url = await self._sink.store(content, get_file_extension(result.filename), result.type)
        logger.info("file_uploaded", url=url, size=result.size, kind=result.type)
        return result.model_copy(update={"url": url})
