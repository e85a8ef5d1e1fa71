# tests/events/test_bus.py
"""Tests for the in-process event bus."""

import pytest
from structlog.testing import capture_logs

from fanblog.events import BlogPostBeforeCreate, BlogPostBeforeUpdate, EventBus


@pytest.mark.asyncio
async def test_handlers_run_in_registration_order() -> None:
    """Test handlers are awaited one after another in subscription order."""
    bus = EventBus()
    seen: list[str] = []

    async def first(event: BlogPostBeforeCreate) -> None:
        seen.append(f"first:{event.category_title}")

    async def second(event: BlogPostBeforeCreate) -> None:
        seen.append(f"second:{event.category_title}")

    bus.subscribe(BlogPostBeforeCreate, first)
    bus.subscribe(BlogPostBeforeCreate, second)
    await bus.publish(BlogPostBeforeCreate(category_title="News"))

    assert seen == ["first:News", "second:News"]


@pytest.mark.asyncio
async def test_only_exact_type_delivered() -> None:
    """Test a handler only receives the event type it subscribed to."""
    bus = EventBus()
    seen: list[object] = []

    async def on_update(event: BlogPostBeforeUpdate) -> None:
        seen.append(event)

    bus.subscribe(BlogPostBeforeUpdate, on_update)
    await bus.publish(BlogPostBeforeCreate(category_title="News"))

    assert seen == []
    assert bus.handlers_for(BlogPostBeforeUpdate) == [on_update]
    assert bus.handlers_for(BlogPostBeforeCreate) == []


@pytest.mark.asyncio
async def test_failing_handler_stops_delivery() -> None:
    """Test an exception propagates and later handlers are skipped."""
    bus = EventBus()
    seen: list[str] = []

    async def failing(_: BlogPostBeforeCreate) -> None:
        raise RuntimeError("boom")

    async def after(_: BlogPostBeforeCreate) -> None:
        seen.append("after")

    bus.subscribe(BlogPostBeforeCreate, failing)
    bus.subscribe(BlogPostBeforeCreate, after)

    with pytest.raises(RuntimeError, match="boom"):
        await bus.publish(BlogPostBeforeCreate())
    assert seen == []


@pytest.mark.asyncio
async def test_publish_without_subscribers() -> None:
    """Test publishing an event nobody listens to is a no-op."""
    await EventBus().publish(BlogPostBeforeUpdate(tag_titles=("python",)))


@pytest.mark.asyncio
async def test_publish_logs_event_type() -> None:
    """Test publishing logs the event class name and handler count."""
    bus = EventBus()

    async def noop(_: BlogPostBeforeCreate) -> None:
        return None

    bus.subscribe(BlogPostBeforeCreate, noop)
    with capture_logs() as logs:
        await bus.publish(BlogPostBeforeCreate())

    assert logs[0]["event"] == "Publishing event"
    assert logs[0]["event_type"] == "BlogPostBeforeCreate"
    assert logs[0]["handlers"] == 1
