"""Repository layer for database operations."""

from fanblog.repositories.base import BaseRepository
from fanblog.repositories.media import MediaRepository, MetaRepository
from fanblog.repositories.post import PostRepository
from fanblog.repositories.protocols import (
    CategoryStore,
    MediaStore,
    MetaStore,
    PostStore,
    TagStore,
)
from fanblog.repositories.taxonomy import CategoryRepository, TagRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "CategoryStore",
    "MediaRepository",
    "MediaStore",
    "MetaRepository",
    "MetaStore",
    "PostRepository",
    "PostStore",
    "TagRepository",
    "TagStore",
]
