"""JSON-file-backed implementation of ProductRepository.

Every stock change is a read-modify-write of the whole file under one
lock, so concurrent sales can never push a product below zero.  Reads
take the same lock and never see a half-written file.
"""

from __future__ import annotations

import json
import threading
from contextlib import AbstractContextManager
from decimal import Decimal
from pathlib import Path

from retail_sales.domain.exceptions import EntityNotFoundError
from retail_sales.domain.model.product import Product
from retail_sales.domain.model.value_objects import Money
from retail_sales.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        if not file_path.exists():
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text("[]", encoding="utf-8")

    def get_by_id(self, product_id: str) -> Product | None:
        return self._read().get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        wanted = name.lower()
        return next(
            (p for p in self._read().values() if p.name.lower() == wanted), None
        )

    def list_all(self) -> list[Product]:
        return list(self._read().values())

    def save(self, product: Product) -> None:
        with self._lock:
            catalog = self._read()
            catalog[product.id] = product
            self._write(catalog)

    def lock(self) -> AbstractContextManager[None]:
        return self._lock

    def adjust_stock(self, product_id: str, delta: int) -> Product:
        with self._lock:
            catalog = self._read()
            product = catalog.get(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            if delta < 0:
                product.remove_stock(-delta)
            elif delta > 0:
                product.add_stock(delta)
            self._write(catalog)
            return product

    # --- File format ------------------------------------------------------------

    @staticmethod
    def _to_row(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock_quantity": product.stock_quantity,
            "is_active": product.is_active,
        }

    @staticmethod
    def _from_row(row: dict) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            price=Money(Decimal(row["price"]), row.get("currency", "USD")),
            stock_quantity=row.get("stock_quantity", 0),
            is_active=row.get("is_active", True),
        )

    def _read(self) -> dict[str, Product]:
        with self._lock:
            rows = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {row["id"]: self._from_row(row) for row in rows}

    def _write(self, catalog: dict[str, Product]) -> None:
        rows = [self._to_row(p) for p in catalog.values()]
        self._file_path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
