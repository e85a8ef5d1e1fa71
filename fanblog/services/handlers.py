"""Subscriptions of the taxonomy services to blog post events."""

from fanblog.events import BlogPostBeforeCreate, BlogPostBeforeUpdate, EventBus
from fanblog.services.taxonomy import CategoryService, TagService


def register_blog_handlers(bus: EventBus, categories: CategoryService, tags: TagService) -> EventBus:
    """
    Wire the handlers that create missing categories and tags.

    The category runs before the tags for each event.
    """
    subscriptions = (
        (BlogPostBeforeCreate, categories.handle_before_create),
        (BlogPostBeforeCreate, tags.handle_before_create),
        (BlogPostBeforeUpdate, categories.handle_before_update),
        (BlogPostBeforeUpdate, tags.handle_before_update),
    )
    for event_type, handler in subscriptions:
        bus.subscribe(event_type, handler)
    return bus
