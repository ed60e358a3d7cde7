"""Application service: Create Sale use case."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from retail_sales.application.dto import SaleDTO, sale_to_dto
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.domain.exceptions import ValidationError
from retail_sales.domain.model.sale import Sale
from retail_sales.domain.repository.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


def generate_sale_number(prefix: str = "S", now: datetime | None = None) -> str:
    """Build a sale number such as ``S-20260117-1f3a9c2e``."""
    now = now or datetime.now(timezone.utc)
    return f"{prefix}-{now:%Y%m%d}-{uuid.uuid4().hex[:8]}"


class CreateSaleHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        dispatcher: DomainEventDispatcher,
        sale_number_prefix: str = "S",
    ) -> None:
        self._sale_repo = sale_repo
        self._dispatcher = dispatcher
        self._sale_number_prefix = sale_number_prefix

    def handle(
        self,
        customer_id: str,
        branch_id: str,
        sale_number: str | None = None,
        sale_date: datetime | None = None,
    ) -> SaleDTO:
        """Open a new draft sale.

        The sale number is normally supplied by the caller; one is
        generated only when it is missing.  Either way it must be unique.
        """
        if sale_number is None:
            sale_number = generate_sale_number(self._sale_number_prefix)
        elif self._sale_repo.get_by_sale_number(sale_number.strip()) is not None:
            raise ValidationError(f"Sale number '{sale_number}' is already in use")

        sale = Sale.create(
            customer_id=customer_id,
            branch_id=branch_id,
            sale_number=sale_number,
            sale_date=sale_date,
        )
        self._sale_repo.save(sale)
        self._dispatcher.dispatch(sale.pull_events())

        logger.info("Sale %s created (id=%s)", sale.sale_number, sale.id)
        return sale_to_dto(sale)
