"""Product aggregate.

Products live independently of sales. A sale only ever reads a product
snapshot; stock changes go through the product repository.
"""

from __future__ import annotations

from dataclasses import dataclass

from retail_sales.domain.exceptions import InsufficientStock, ValidationError
from retail_sales.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog together with its stock on hand."""

    id: str
    name: str
    price: Money
    stock_quantity: int = 0
    is_active: bool = True

    def add_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity to add must be positive")
        self.stock_quantity += quantity

    def remove_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity to remove must be positive")
        if quantity > self.stock_quantity:
            raise InsufficientStock(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.stock_quantity} available)"
            )
        self.stock_quantity -= quantity

    @property
    def is_available_for_sale(self) -> bool:
        return self.is_active and self.stock_quantity > 0
