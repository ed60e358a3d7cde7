"""Application service: Remove Sale Item use case.

The item is cancelled rather than deleted, and its quantity goes back
to the product's stock.
"""

from __future__ import annotations

import logging

from retail_sales.application.dto import RemoveSaleItemResultDTO
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.repository.product_repository import ProductRepository
from retail_sales.domain.repository.sale_repository import SaleRepository
from retail_sales.domain.service.stock_coordinator import StockCoordinator

logger = logging.getLogger(__name__)


class RemoveSaleItemHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        dispatcher: DomainEventDispatcher,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._dispatcher = dispatcher

    def handle(self, sale_id: str, item_id: str, reason: str = "") -> RemoveSaleItemResultDTO:
        with self._sale_repo.lock(sale_id):
            sale = self._sale_repo.get_by_id(sale_id)
            if sale is None:
                raise EntityNotFoundError(f"Sale '{sale_id}' not found")

            stock = StockCoordinator(self._product_repo)
            with sale.pending_change():
                release = sale.remove_item(item_id, reason)
                stock.release_item(release)

            self._sale_repo.save(sale)

        self._dispatcher.dispatch(sale.pull_events())
        logger.info(
            "Removed %d x %s from sale %s",
            release.quantity,
            release.product_name,
            sale.sale_number,
        )
        return RemoveSaleItemResultDTO(
            sale_id=sale.id,
            item_id=release.item_id,
            removed_quantity=release.quantity,
            sale_total_amount=str(sale.total_amount),
        )
