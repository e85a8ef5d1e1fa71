"""Storage backends for uploaded media."""

from fanblog.services.storage.base import StorageService
from fanblog.services.storage.local import LocalStorage


def get_storage_service() -> StorageService:
    return LocalStorage()


__all__ = ["LocalStorage", "StorageService", "get_storage_service"]
