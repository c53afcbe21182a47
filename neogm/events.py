"""Node lifecycle events and an in-process dispatcher.

Repositories dispatch :class:`NodeCreatedEvent`, :class:`NodeUpdatedEvent`
and :class:`NodeDeletedEvent`. Dispatch is fire-and-forget: a failing
handler is logged and never aborts the repository operation.
"""

import logging
from uuid import UUID, uuid4

import asyncio
import typing as t
from datetime import UTC, datetime
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class NodeEvent(BaseModel):
    """Base event carrying the node it concerns."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    event_type: t.ClassVar[str] = "node"

    node: t.Any
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"{type(self).__name__}({type(self.node).__name__}, {self.event_id})"


class NodeCreatedEvent(NodeEvent):
    event_type: t.ClassVar[str] = "node.created"


class NodeUpdatedEvent(NodeEvent):
    event_type: t.ClassVar[str] = "node.updated"


class NodeDeletedEvent(NodeEvent):
    event_type: t.ClassVar[str] = "node.deleted"


class EventHandlerResult(BaseModel):
    """Result of event handler execution."""

    subscription_id: UUID
    success: bool
    error_message: str | None = None


EventHandlerFunc = t.Callable[[NodeEvent], t.Any]


class EventSubscription(BaseModel):
    """A handler bound to an event class (or to every event)."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    subscription_id: UUID = Field(default_factory=uuid4)
    handler: EventHandlerFunc
    event_class: type[NodeEvent] | None = None

    def matches(self, event: NodeEvent) -> bool:
        return self.event_class is None or isinstance(event, self.event_class)


class EventDispatcher(t.Protocol):
    async def dispatch(self, event: NodeEvent) -> t.Any: ...


class LocalEventDispatcher:
    """Calls matching subscribers in subscription order."""

    def __init__(self) -> None:
        self._subscriptions: list[EventSubscription] = []
        self.dispatched: int = 0
        self.failed: int = 0

    def subscribe(
        self,
        handler: EventHandlerFunc,
        event_class: type[NodeEvent] | None = None,
    ) -> UUID:
        subscription = EventSubscription(handler=handler, event_class=event_class)
        self._subscriptions.append(subscription)
        return subscription.subscription_id

    def unsubscribe(self, subscription_id: UUID) -> bool:
        for subscription in self._subscriptions:
            if subscription.subscription_id == subscription_id:
                self._subscriptions.remove(subscription)
                return True
        return False

    def on(
        self,
        event_class: type[NodeEvent] | None = None,
    ) -> t.Callable[[EventHandlerFunc], EventHandlerFunc]:
        """Decorator form of :meth:`subscribe`."""

        def decorator(func: EventHandlerFunc) -> EventHandlerFunc:
            self.subscribe(func, event_class)
            return func

        return decorator

    @property
    def subscriptions(self) -> list[EventSubscription]:
        return list(self._subscriptions)

    async def _call(self, subscription: EventSubscription, event: NodeEvent) -> EventHandlerResult:
        try:
            result = subscription.handler(event)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            self.failed += 1
            logger.exception("Event handler failed for %s", event)
            return EventHandlerResult(
                subscription_id=subscription.subscription_id,
                success=False,
                error_message=str(e),
            )
        return EventHandlerResult(
            subscription_id=subscription.subscription_id,
            success=True,
        )

    async def dispatch(self, event: NodeEvent) -> list[EventHandlerResult]:
        self.dispatched += 1
        logger.debug("Dispatching %s", event)
        return [
            await self._call(subscription, event)
            for subscription in list(self._subscriptions)
            if subscription.matches(event)
        ]
