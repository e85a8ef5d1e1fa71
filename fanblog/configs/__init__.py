from fanblog.configs.settings import (
    CacheConfig,
    LimiterConfig,
    RedisCacheConfig,
    pool_kwargs,
    settings,
)

__all__ = [
    "CacheConfig",
    "LimiterConfig",
    "RedisCacheConfig",
    "pool_kwargs",
    "settings",
]
