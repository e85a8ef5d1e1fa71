"""
Local filesystem storage implementation.

Files land under ``UPLOADS_DIR/{MEDIA_CONTAINER_NAME}`` and are served by the
static files mount of the application.
"""

from pathlib import Path

import aiofiles
import aiofiles.os

from fanblog.configs.settings import settings
from fanblog.errors import StorageError
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class LocalStorage:
    def __init__(self, root: Path | None = None) -> None:
        self.root = root or settings.UPLOADS_DIR / settings.MEDIA_CONTAINER_NAME
        self.root.mkdir(parents=True, exist_ok=True)

    def _file_path(self, file_name: str, path: str) -> Path:
        target = (self.root / path / file_name).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise StorageError("Invalid storage path.")
        return target

    async def save_file(self, data: bytes, file_name: str, path: str) -> None:
        target = self._file_path(file_name, path)
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.exception("Failed to write file", path=str(target))
            raise StorageError from e

    async def delete_file(self, file_name: str, path: str) -> bool:
        target = self._file_path(file_name, path)
        if not await aiofiles.os.path.exists(target):
            return False
        try:
            await aiofiles.os.remove(target)
        except OSError as e:
            logger.exception("Failed to delete file", path=str(target))
            raise StorageError from e
        return True
