"""Abstract repository for the product catalogue.

The product store is the single owner of stock on hand; sales only
ever change it through ``adjust_stock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from retail_sales.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Case-insensitive lookup by name."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Every product, in the order they were added."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def adjust_stock(self, product_id: str, delta: int) -> Product:
        """Atomically add *delta* to the product's stock and return it.

        A negative delta reserves stock, a positive one releases it.
        Must raise ``InsufficientStock`` instead of going below zero and
        ``EntityNotFoundError`` for an unknown product.
        """

    @abstractmethod
    def lock(self) -> AbstractContextManager[None]:
        """Serialize catalogue changes that read before they write, such as
        picking the next product ID."""
