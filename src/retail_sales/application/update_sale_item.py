"""Application service: Update Sale Item quantity use case."""

from __future__ import annotations

import logging

from retail_sales.application.dto import SaleItemResultDTO, item_to_dto
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import EntityNotFoundError, SaleCancelled
from retail_sales.domain.repository.product_repository import ProductRepository
from retail_sales.domain.repository.sale_repository import SaleRepository
from retail_sales.domain.service.stock_coordinator import StockCoordinator

logger = logging.getLogger(__name__)


class UpdateSaleItemHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        dispatcher: DomainEventDispatcher,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._dispatcher = dispatcher

    def handle(self, sale_id: str, item_id: str, new_quantity: int) -> SaleItemResultDTO:
        """Change an item's quantity and settle the stock difference."""
        with self._sale_repo.lock(sale_id):
            sale = self._sale_repo.get_by_id(sale_id)
            if sale is None:
                raise EntityNotFoundError(f"Sale '{sale_id}' not found")

            if sale.is_cancelled:
                raise SaleCancelled(f"Sale {sale.sale_number} is cancelled")
            item = sale.find_active_item(item_id)
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                raise EntityNotFoundError(
                    f"Product '{item.product_id}' no longer exists"
                )

            stock = StockCoordinator(self._product_repo)
            with sale.pending_change():
                change = sale.update_item_quantity(item_id, new_quantity, product)
                stock.settle_quantity_change(change)

            self._sale_repo.save(sale)

        self._dispatcher.dispatch(sale.pull_events())
        updated = sale.find_active_item(item_id)
        logger.info(
            "Item %s in sale %s changed by %+d",
            item_id,
            sale.sale_number,
            change.difference,
        )
        return SaleItemResultDTO(
            sale_id=sale.id,
            item=item_to_dto(updated),
            sale_total_amount=str(sale.total_amount),
            quantity_difference=change.difference,
        )
