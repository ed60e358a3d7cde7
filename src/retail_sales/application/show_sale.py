"""Application service: Show Sale use case (query)."""

from __future__ import annotations

from retail_sales.application.dto import SaleDTO, sale_to_dto
from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.repository.sale_repository import SaleRepository


class ShowSaleHandler:

    def __init__(self, sale_repo: SaleRepository) -> None:
        self._sale_repo = sale_repo

    def handle(self, sale_id: str) -> SaleDTO:
        sale = self._sale_repo.get_by_id(sale_id)
        if sale is None:
            sale = self._sale_repo.get_by_sale_number(sale_id)
        if sale is None:
            raise EntityNotFoundError(f"Sale '{sale_id}' not found")
        return sale_to_dto(sale)
