"""JSON-file-backed implementation of SaleRepository.

The per-sale locks serialize use cases; the file lock serializes every
read and write of the shared file, whichever sale they touch.
"""

from __future__ import annotations

import json
import threading
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from retail_sales.domain.exceptions import ValidationError
from retail_sales.domain.model.sale import Sale, SaleItem, SaleStatus
from retail_sales.domain.model.value_objects import Discount, Money
from retail_sales.domain.repository.sale_repository import SaleRepository
from retail_sales.infrastructure.locking import KeyedLock


class JsonSaleRepository(SaleRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_lock = threading.RLock()
        self._sale_locks = KeyedLock()
        self._ensure_file()

    # --- SaleRepository interface ---------------------------------------------

    def get_by_id(self, sale_id: str) -> Sale | None:
        for raw in self._load_raw():
            if raw["id"] == sale_id:
                return self._to_domain(raw)
        return None

    def get_by_sale_number(self, sale_number: str) -> Sale | None:
        for raw in self._load_raw():
            if raw["sale_number"] == sale_number:
                return self._to_domain(raw)
        return None

    def save(self, sale: Sale) -> None:
        with self._file_lock:
            sales = self._load_raw()
            if any(
                raw["sale_number"] == sale.sale_number and raw["id"] != sale.id
                for raw in sales
            ):
                raise ValidationError(f"Sale number '{sale.sale_number}' is already in use")

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(sales):
                if raw["id"] == sale.id:
                    sales[i] = self._to_raw(sale)
                    replaced = True
                    break
            if not replaced:
                sales.append(self._to_raw(sale))

            self._persist_raw(sales)

    def lock(self, sale_id: str) -> AbstractContextManager[None]:
        return self._sale_locks.hold(sale_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sale: Sale) -> dict:
        return {
            "id": sale.id,
            "sale_number": sale.sale_number,
            "customer_id": sale.customer_id,
            "branch_id": sale.branch_id,
            "sale_date": sale.sale_date.isoformat(),
            "status": sale.status.value,
            "created_at": sale.created_at.isoformat(),
            "updated_at": sale.updated_at.isoformat() if sale.updated_at else None,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "discount_percentage": str(item.discount.percentage),
                    "discount_amount": str(item.discount.amount),
                    "is_cancelled": item.is_cancelled,
                    "created_at": item.created_at.isoformat(),
                    "updated_at": item.updated_at.isoformat() if item.updated_at else None,
                }
                for item in sale.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Sale:
        items = [
            SaleItem(
                id=i["id"],
                sale_id=raw["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                discount=Discount(
                    Decimal(i["discount_percentage"]), Decimal(i["discount_amount"])
                ),
                is_cancelled=i["is_cancelled"],
                created_at=datetime.fromisoformat(i["created_at"]),
                updated_at=_parse_optional(i.get("updated_at")),
            )
            for i in raw["items"]
        ]
        return Sale(
            id=raw["id"],
            sale_number=raw["sale_number"],
            customer_id=raw["customer_id"],
            branch_id=raw["branch_id"],
            sale_date=datetime.fromisoformat(raw["sale_date"]),
            items=items,
            status=SaleStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=_parse_optional(raw.get("updated_at")),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._file_lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, sales: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(sales, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _parse_optional(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
