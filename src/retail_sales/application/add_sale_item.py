"""Application service: Add Sale Item use case.

Orchestrates the Sale aggregate (item rules, discount) and the Stock
Coordinator (stock debit).  If the product store refuses the debit the
in-memory sale is rolled back and nothing is saved.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from retail_sales.application.dto import SaleItemResultDTO, item_to_dto
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import EntityNotFoundError, ValidationError
from retail_sales.domain.model.value_objects import Money
from retail_sales.domain.repository.product_repository import ProductRepository
from retail_sales.domain.repository.sale_repository import SaleRepository
from retail_sales.domain.service.stock_coordinator import StockCoordinator

logger = logging.getLogger(__name__)


def _price_override(raw: str | Decimal | None, currency: str) -> Money | None:
    """Only a positive price overrides the catalog price."""
    if raw is None:
        return None
    try:
        amount = Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid unit price: {raw!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Invalid unit price: {raw!r}")
    if amount <= 0:
        return None
    return Money(amount, currency)


class AddSaleItemHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        dispatcher: DomainEventDispatcher,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._dispatcher = dispatcher

    def handle(
        self,
        sale_id: str,
        product_id: str,
        quantity: int,
        unit_price: str | Decimal | None = None,
    ) -> SaleItemResultDTO:
        with self._sale_repo.lock(sale_id):
            sale = self._sale_repo.get_by_id(sale_id)
            if sale is None:
                raise EntityNotFoundError(f"Sale '{sale_id}' not found")

            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")

            override = _price_override(unit_price, product.price.currency)

            stock = StockCoordinator(self._product_repo)
            with sale.pending_change():
                item = sale.add_item(product, quantity, override)
                stock.reserve_for_item(item)

            self._sale_repo.save(sale)

        self._dispatcher.dispatch(sale.pull_events())
        logger.info(
            "Added %d x %s to sale %s", item.quantity, item.product_name, sale.sale_number
        )
        return SaleItemResultDTO(
            sale_id=sale.id,
            item=item_to_dto(item),
            sale_total_amount=str(sale.total_amount),
            quantity_difference=item.quantity,
        )
