"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.config import get_settings
from retail_sales.infrastructure.event_publisher import LoggingEventPublisher
from retail_sales.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from retail_sales.infrastructure.persistence.json_sale_repository import (
    JsonSaleRepository,
)

# One instance per process so the repositories' locks are shared.


@lru_cache
def product_repository() -> JsonProductRepository:
    return JsonProductRepository(get_settings().data_dir / "products.json")


@lru_cache
def sale_repository() -> JsonSaleRepository:
    return JsonSaleRepository(get_settings().data_dir / "sales.json")


@lru_cache
def event_dispatcher() -> DomainEventDispatcher:
    return DomainEventDispatcher(LoggingEventPublisher())


def sale_number_prefix() -> str:
    return get_settings().sale_number_prefix
