"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from retail_sales.application.dto import ProductDTO, product_to_dto
from retail_sales.domain.exceptions import ValidationError
from retail_sales.domain.model.product import Product
from retail_sales.domain.model.value_objects import Money
from retail_sales.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, price: str, stock_quantity: int = 0) -> ProductDTO:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

        money = Money.of(price)
        if money.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        with self._product_repo.lock():
            if self._product_repo.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Product '{name}' already exists")

            # Auto-assign ID based on existing products
            all_products = self._product_repo.list_all()
            if all_products:
                next_id = str(max(int(p.id) for p in all_products) + 1)
            else:
                next_id = "1"

            product = Product(
                id=next_id,
                name=name.strip(),
                price=money,
                stock_quantity=stock_quantity,
            )
            self._product_repo.save(product)

        logger.info("Product %s '%s' added", product.id, product.name)
        return product_to_dto(product)
