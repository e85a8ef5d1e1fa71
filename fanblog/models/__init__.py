"""
Database tables.

Every table is imported here so ``SQLModel.metadata`` is complete for
``init_db`` and Alembic without scanning modules at runtime.
"""

from fanblog.models.blog import CategoryDB, PostDB, PostTagDB, TagDB
from fanblog.models.media import MediaDB, MetaDB

TABLES = (CategoryDB, TagDB, PostDB, PostTagDB, MediaDB, MetaDB)

__all__ = ["TABLES", "CategoryDB", "MediaDB", "MetaDB", "PostDB", "PostTagDB", "TagDB"]
