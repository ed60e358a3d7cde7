"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from retail_sales.domain.model.product import Product
from retail_sales.domain.model.sale import Sale, SaleItem


@dataclass(frozen=True)
class SaleItemDTO:
    """Output: a single line item as displayed to the user."""

    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    discount: str  # e.g. "10%"
    discount_amount: str
    total_price: str
    is_cancelled: bool


@dataclass(frozen=True)
class SaleDTO:
    """Output: a complete sale as displayed to the user."""

    id: str
    sale_number: str
    customer_id: str
    branch_id: str
    sale_date: str
    status: str
    items: list[SaleItemDTO]
    subtotal: str
    total_discount: str
    total_amount: str
    created_at: str
    updated_at: str | None


@dataclass(frozen=True)
class SaleItemResultDTO:
    """Output: the item touched by an add/update plus the new sale total."""

    sale_id: str
    item: SaleItemDTO
    sale_total_amount: str
    quantity_difference: int = 0


@dataclass(frozen=True)
class RemoveSaleItemResultDTO:
    sale_id: str
    item_id: str
    removed_quantity: int
    sale_total_amount: str


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    price: str
    stock_quantity: int
    is_active: bool
    is_available: bool


# --- Mapping ------------------------------------------------------------------

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def item_to_dto(item: SaleItem) -> SaleItemDTO:
    return SaleItemDTO(
        id=item.id,
        product_id=item.product_id,
        product_name=item.product_name,
        quantity=item.quantity,
        unit_price=str(item.unit_price),
        discount=str(item.discount),
        discount_amount=str(item.discount_amount),
        total_price=str(item.total_price),
        is_cancelled=item.is_cancelled,
    )


def sale_to_dto(sale: Sale) -> SaleDTO:
    return SaleDTO(
        id=sale.id,
        sale_number=sale.sale_number,
        customer_id=sale.customer_id,
        branch_id=sale.branch_id,
        sale_date=sale.sale_date.strftime("%Y-%m-%d"),
        status=sale.status.value,
        items=[item_to_dto(item) for item in sale.items],
        subtotal=str(sale.subtotal),
        total_discount=str(sale.total_discount),
        total_amount=str(sale.total_amount),
        created_at=sale.created_at.strftime(_TIMESTAMP_FORMAT),
        updated_at=(
            sale.updated_at.strftime(_TIMESTAMP_FORMAT) if sale.updated_at else None
        ),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        price=str(product.price),
        stock_quantity=product.stock_quantity,
        is_active=product.is_active,
        is_available=product.is_available_for_sale,
    )
