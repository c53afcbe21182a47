"""Tests for node lifecycle events."""

from uuid import UUID

import pytest
from datetime import datetime

from neogm.events import (
    LocalEventDispatcher,
    NodeCreatedEvent,
    NodeDeletedEvent,
    NodeEvent,
    NodeUpdatedEvent,
)
from tests.fakes import Person


@pytest.mark.unit
class TestNodeEvent:
    def test_event_fields(self):
        person = Person(id=1)
        event = NodeCreatedEvent(node=person)

        assert event.node is person
        assert isinstance(event.event_id, UUID)
        assert isinstance(event.timestamp, datetime)
        assert event.event_type == "node.created"
        assert str(event).startswith("NodeCreatedEvent(Person, ")

    def test_event_types(self):
        assert NodeUpdatedEvent.event_type == "node.updated"
        assert NodeDeletedEvent.event_type == "node.deleted"
        assert issubclass(NodeDeletedEvent, NodeEvent)


@pytest.mark.unit
class TestLocalEventDispatcher:
    """Test in-process dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch_to_all_subscribers(self):
        dispatcher = LocalEventDispatcher()
        seen = []
        dispatcher.subscribe(seen.append)

        event = NodeCreatedEvent(node=Person())
        results = await dispatcher.dispatch(event)

        assert seen == [event]
        assert [r.success for r in results] == [True]
        assert dispatcher.dispatched == 1

    @pytest.mark.asyncio
    async def test_filter_by_event_class(self):
        dispatcher = LocalEventDispatcher()
        deleted = []
        dispatcher.subscribe(deleted.append, NodeDeletedEvent)

        await dispatcher.dispatch(NodeCreatedEvent(node=Person()))
        await dispatcher.dispatch(NodeDeletedEvent(node=Person()))

        assert [type(e) for e in deleted] == [NodeDeletedEvent]

    @pytest.mark.asyncio
    async def test_async_handler(self):
        dispatcher = LocalEventDispatcher()
        seen = []

        @dispatcher.on(NodeUpdatedEvent)
        async def on_updated(event):
            seen.append(event.node)

        person = Person()
        await dispatcher.dispatch(NodeUpdatedEvent(node=person))

        assert seen == [person]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_dispatch(self):
        dispatcher = LocalEventDispatcher()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        dispatcher.subscribe(broken)
        dispatcher.subscribe(seen.append)

        results = await dispatcher.dispatch(NodeCreatedEvent(node=Person()))

        assert len(seen) == 1
        assert results[0].success is False
        assert results[0].error_message == "boom"
        assert results[1].success is True
        assert dispatcher.failed == 1

    def test_subscriptions_reflect_unsubscribe(self):
        dispatcher = LocalEventDispatcher()
        kept = dispatcher.subscribe(print, NodeDeletedEvent)
        dropped = dispatcher.subscribe(print)

        dispatcher.unsubscribe(dropped)

        assert [s.subscription_id for s in dispatcher.subscriptions] == [kept]
        assert dispatcher.subscriptions[0].matches(NodeDeletedEvent(node=Person()))
        assert not dispatcher.subscriptions[0].matches(NodeCreatedEvent(node=Person()))

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        dispatcher = LocalEventDispatcher()
        seen = []
        subscription_id = dispatcher.subscribe(seen.append)

        assert dispatcher.unsubscribe(subscription_id) is True
        assert dispatcher.unsubscribe(subscription_id) is False
        await dispatcher.dispatch(NodeCreatedEvent(node=Person()))

        assert seen == []
        assert dispatcher.subscriptions == []
