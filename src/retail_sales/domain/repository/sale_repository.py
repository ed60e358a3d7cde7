"""Abstract repository for Sale aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from retail_sales.domain.model.sale import Sale


class SaleRepository(ABC):

    @abstractmethod
    def get_by_id(self, sale_id: str) -> Sale | None:
        """Return a sale by its ID, or None if not found."""

    @abstractmethod
    def get_by_sale_number(self, sale_number: str) -> Sale | None:
        """Return a sale by its sale number, or None if not found."""

    @abstractmethod
    def save(self, sale: Sale) -> None:
        """Persist a new or updated sale, replacing its whole item list.

        Raises ``ValidationError`` if another sale already uses the same
        sale number; the check and the write are one atomic step.
        """

    @abstractmethod
    def lock(self, sale_id: str) -> AbstractContextManager[None]:
        """Serialize work on one sale; held for a whole load-mutate-save cycle."""
