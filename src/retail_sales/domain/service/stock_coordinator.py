"""Domain service: Stock Coordinator.

Pairs every sale item mutation with exactly one compensating stock
adjustment on the product store, so that for every product

    stock reserved == sum of active item quantities over open sales

The coordinator makes no business decisions of its own.  The Sale
aggregate validates; the coordinator settles.  A failed reservation
surfaces as ``InsufficientStock`` and is never retried here.
"""

from __future__ import annotations

import logging

from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.model.sale import QuantityChange, SaleItem, StockRelease
from retail_sales.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockCoordinator:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def reserve_for_item(self, item: SaleItem) -> None:
        """Debit stock for a freshly added item."""
        self._adjust(item.product_id, -item.quantity)

    def settle_quantity_change(self, change: QuantityChange) -> None:
        """Debit or credit by the signed difference; nothing if unchanged."""
        if change.difference == 0:
            return
        self._adjust(change.product_id, -change.difference)

    def release_item(self, release: StockRelease) -> None:
        """Credit stock for a removed item."""
        self._adjust(release.product_id, release.quantity)

    def release_for_cancellation(self, releases: list[StockRelease]) -> None:
        """Credit stock for every item a cancellation deactivated.

        Checks every product exists before touching any of them so a
        missing record cannot leave half the sale's stock released.
        """
        for release in releases:
            if self._product_repo.get_by_id(release.product_id) is None:
                raise EntityNotFoundError(
                    f"No product record for '{release.product_name}'"
                )
        for release in releases:
            self._adjust(release.product_id, release.quantity)

    def _adjust(self, product_id: str, delta: int) -> None:
        product = self._product_repo.adjust_stock(product_id, delta)
        logger.debug(
            "Stock for product %s adjusted by %+d (now %d)",
            product_id,
            delta,
            product.stock_quantity,
        )
