"""Event publisher that writes domain events to the log.

Stands in for a message broker: every event becomes one INFO record on
the ``retail_sales.events`` logger.
"""

from __future__ import annotations

import dataclasses
import logging

from retail_sales.application.event_dispatcher import EventPublisher
from retail_sales.domain.model.events import DomainEvent

logger = logging.getLogger("retail_sales.events")


class LoggingEventPublisher(EventPublisher):

    def publish(self, event: DomainEvent) -> None:
        payload = {
            f.name: str(getattr(event, f.name)) for f in dataclasses.fields(event)
        }
        logger.info("%s %s", event.name, payload)
