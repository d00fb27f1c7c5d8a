"""Upload sinks and file helpers for uploaded media."""

import asyncio
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from uuid import uuid4

from PIL import Image

from moments.core.modules.upload.models import MediaKind
from moments.errors import ValidationError

UPLOADS_URL_PREFIX = "/uploads"


def get_file_extension(filename: str) -> str:
    """Lowercased extension without the dot, or an empty string."""
    name = Path(filename).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def read_image_size(content: bytes) -> tuple[int, int]:
    """Return (width, height) of an image.

    Raises:
        ValidationError: If the bytes are not an image Pillow can open
    """
    try:
        with Image.open(BytesIO(content)) as img:
            width, height = img.size
            img.verify()
    except Exception as e:
        raise ValidationError("Invalid image file") from e
    return width, height


class UploadSink(ABC):
    """Stores uploaded bytes and returns a durable reference."""

    async def start(self) -> None:
        """Prepare the sink on application startup."""

    @abstractmethod
    async def store(self, content: bytes, extension: str, kind: MediaKind) -> str:
        """Persist content and return the URL it is served from."""


class LocalUploadSink(UploadSink):
    """Writes files under `<uploads_path>/<images|videos>/` with random names."""

    def __init__(self, uploads_path: str) -> None:
        self._root = Path(uploads_path)

    async def start(self) -> None:
        for kind in MediaKind:
            (self._root / kind.folder).mkdir(parents=True, exist_ok=True)

    async def store(self, content: bytes, extension: str, kind: MediaKind) -> str:
        filename = f"{uuid4()}.{extension}"
        file_path = self._root / kind.folder / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(file_path.write_bytes, content)
        return f"{UPLOADS_URL_PREFIX}/{kind.folder}/{filename}"
