import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from storefront.core.types import ChangeType, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A committed row change, published so subscribers can refetch."""
    table: str
    type: ChangeType
    record_id: Optional[str]
    record: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utcnow)


Subscriber = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


class EventBus:
    """In-process publish/subscribe for catalog changes.

    Delivery is fire-and-forget: a failing subscriber is logged and skipped,
    it never fails the mutation that produced the event.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Subscriber:
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    async def publish(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {event.type.value} {event.table}")


event_bus = EventBus()
