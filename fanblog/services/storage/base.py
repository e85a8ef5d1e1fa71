"""
Base storage protocol for file storage operations.

Backends store files under ``{container}/{path}/{file_name}``; the image
service builds public URLs from the same layout.
"""

from abc import abstractmethod
from typing import Protocol


class StorageService(Protocol):
    """Interface every storage backend implements."""

    @abstractmethod
    async def save_file(self, data: bytes, file_name: str, path: str) -> None:
        """
        Write ``data`` to ``path/file_name``, replacing any existing file.

        Args:
            data: Raw file bytes
            file_name: Name of the file, e.g. ``hello.png``
            path: Slash separated folder, e.g. ``blog/2024/05/sm``
        """
        ...

    @abstractmethod
    async def delete_file(self, file_name: str, path: str) -> bool:
        """
        Remove ``path/file_name``.

        Returns:
            bool: True if a file was removed, False if it did not exist
        """
        ...
