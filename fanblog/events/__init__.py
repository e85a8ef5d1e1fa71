from fanblog.events.blog import (
    BlogPostBeforeCreate,
    BlogPostBeforeUpdate,
    BlogPostCreated,
    BlogPostUpdated,
)
from fanblog.events.bus import EventBus, Handler

__all__ = [
    "BlogPostBeforeCreate",
    "BlogPostBeforeUpdate",
    "BlogPostCreated",
    "BlogPostUpdated",
    "EventBus",
    "Handler",
]
