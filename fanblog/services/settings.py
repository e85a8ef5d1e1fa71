"""Blog settings stored as rows of the meta table."""

from pydantic import TypeAdapter

from fanblog.managers import BlogCache
from fanblog.monitoring import get_logger
from fanblog.repositories import MetaStore
from fanblog.schemas import BlogSettings
from fanblog.utils.cache_keys import BlogCacheKey, BlogCacheTTL

logger = get_logger(__name__)

META_PREFIX = "blogsettings."

_SETTINGS = TypeAdapter(BlogSettings)


def meta_key(field_name: str) -> str:
    """``default_category_id`` is stored as ``blogsettings.defaultcategoryid``."""
    return META_PREFIX + field_name.replace("_", "").lower()


class SettingService:
    def __init__(self, meta: MetaStore, cache: BlogCache) -> None:
        self.meta = meta
        self.cache = cache

    async def _load(self) -> BlogSettings:
        rows = await self.meta.get_values(META_PREFIX)
        values = {
            name: rows[meta_key(name)]
            for name in BlogSettings.model_fields
            if meta_key(name) in rows
        }
        return BlogSettings.model_validate(values)

    async def get_blog_settings(self) -> BlogSettings:
        return await self.cache.get_or_set(
            BlogCacheKey.SETTINGS_BLOG,
            self._load,
            BlogCacheTTL.SETTINGS,
            adapter=_SETTINGS,
        )

    async def upsert_blog_settings(self, **changes: int) -> BlogSettings:
        """Persist the given fields and drop the cached copy."""
        current = await self.get_blog_settings()
        updated = BlogSettings.model_validate({**current.model_dump(), **changes})
        await self.meta.upsert({meta_key(k): str(v) for k, v in updated.model_dump().items()})
        await self.meta.commit()
        await self.cache.remove(BlogCacheKey.SETTINGS_BLOG)
        logger.info("Blog settings updated", **changes)
        return updated
