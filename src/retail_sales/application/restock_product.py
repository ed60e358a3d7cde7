"""Application service: Restock Product use case."""

from __future__ import annotations

import logging

from retail_sales.application.dto import ProductDTO, product_to_dto
from retail_sales.domain.exceptions import ValidationError
from retail_sales.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class RestockProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> ProductDTO:
        """Add *quantity* units to a product's stock on hand.

        Goes through the repository's atomic adjustment so it can not
        race with sales reserving the same product.
        """
        if quantity <= 0:
            raise ValidationError("Quantity to add must be positive")
        product = self._product_repo.adjust_stock(product_id, quantity)
        logger.info(
            "Product %s restocked by %d (now %d)",
            product.id,
            quantity,
            product.stock_quantity,
        )
        return product_to_dto(product)
