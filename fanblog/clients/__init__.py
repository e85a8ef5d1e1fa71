from fanblog.clients.memory_client import MemoryClient
from fanblog.clients.protocols import CacheClientProtocol
from fanblog.clients.redis_client import RedisClient

__all__ = ["CacheClientProtocol", "MemoryClient", "RedisClient"]
