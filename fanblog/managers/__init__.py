from fanblog.managers.blog_cache import BlogCache
from fanblog.managers.cache_manager import CacheManager
from fanblog.managers.rate_limiter import get_identifier, limiter, rate_limit_exceeded_handler
from fanblog.managers.statistics import CacheStatistics

__all__ = [
    "BlogCache",
    "CacheManager",
    "CacheStatistics",
    "get_identifier",
    "limiter",
    "rate_limit_exceeded_handler",
]
