"""Application service: Confirm Sale use case.

Stock was already reserved item by item, so confirming is a pure state
transition on the aggregate.
"""

from __future__ import annotations

import logging

from retail_sales.application.dto import SaleDTO, sale_to_dto
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.repository.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


class ConfirmSaleHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        dispatcher: DomainEventDispatcher,
    ) -> None:
        self._sale_repo = sale_repo
        self._dispatcher = dispatcher

    def handle(self, sale_id: str) -> SaleDTO:
        with self._sale_repo.lock(sale_id):
            sale = self._sale_repo.get_by_id(sale_id)
            if sale is None:
                raise EntityNotFoundError(f"Sale '{sale_id}' not found")

            sale.confirm()
            self._sale_repo.save(sale)

        self._dispatcher.dispatch(sale.pull_events())
        logger.info("Sale %s confirmed", sale.sale_number)
        return sale_to_dto(sale)
