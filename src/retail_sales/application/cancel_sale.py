"""Application service: Cancel Sale use case.

Cancels the sale and every active item on it, then returns each item's
quantity to stock.  Cancellation is terminal; the sale and its items
stay on record.
"""

from __future__ import annotations

import logging

from retail_sales.application.dto import SaleDTO, sale_to_dto
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.repository.product_repository import ProductRepository
from retail_sales.domain.repository.sale_repository import SaleRepository
from retail_sales.domain.service.stock_coordinator import StockCoordinator

logger = logging.getLogger(__name__)


class CancelSaleHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        dispatcher: DomainEventDispatcher,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._dispatcher = dispatcher

    def handle(self, sale_id: str, reason: str = "") -> SaleDTO:
        with self._sale_repo.lock(sale_id):
            sale = self._sale_repo.get_by_id(sale_id)
            if sale is None:
                raise EntityNotFoundError(f"Sale '{sale_id}' not found")

            stock = StockCoordinator(self._product_repo)
            with sale.pending_change():
                releases = sale.cancel(reason)
                stock.release_for_cancellation(releases)

            self._sale_repo.save(sale)

        self._dispatcher.dispatch(sale.pull_events())
        logger.info(
            "Sale %s cancelled, %d items returned to stock",
            sale.sale_number,
            len(releases),
        )
        return sale_to_dto(sale)
