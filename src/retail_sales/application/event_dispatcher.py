"""Publishing of domain events drained from the Sale aggregate.

Dispatch is fire-and-forget: it runs after the sale has been saved and a
publisher failure is logged, never raised, so it can not undo a sale
mutation that already happened.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from retail_sales.domain.model.events import DomainEvent

logger = logging.getLogger(__name__)


class EventPublisher(ABC):

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Hand one event to the outside world."""


class DomainEventDispatcher:

    def __init__(self, publisher: EventPublisher) -> None:
        self._publisher = publisher

    def dispatch(self, events: list[DomainEvent]) -> None:
        if not events:
            return
        logger.debug("Dispatching %d domain events", len(events))
        for event in events:
            try:
                self._publisher.publish(event)
            except Exception:
                logger.error(
                    "Failed to publish %s for sale %s",
                    event.name,
                    event.sale_id,
                    exc_info=True,
                )
