"""CLI commands for the Sale aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from retail_sales.application.add_sale_item import AddSaleItemHandler
from retail_sales.application.cancel_sale import CancelSaleHandler
from retail_sales.application.confirm_sale import ConfirmSaleHandler
from retail_sales.application.create_sale import CreateSaleHandler
from retail_sales.application.dto import SaleDTO, SaleItemResultDTO
from retail_sales.application.remove_sale_item import RemoveSaleItemHandler
from retail_sales.application.show_sale import ShowSaleHandler
from retail_sales.application.update_sale_item import UpdateSaleItemHandler
from retail_sales.domain.exceptions import DomainException
from retail_sales.infrastructure.bootstrap import (
    event_dispatcher,
    product_repository,
    sale_number_prefix,
    sale_repository,
)


def _display_sale(dto: SaleDTO) -> None:
    """Shared formatting for displaying a sale."""
    click.echo(f"Sale {dto.sale_number}  (status={dto.status})")
    click.echo(f"ID:       {dto.id}")
    click.echo(f"Customer: {dto.customer_id}   Branch: {dto.branch_id}")
    click.echo(f"Date:     {dto.sale_date}   Created: {dto.created_at}")
    click.echo()
    click.echo(
        f"  {'Item':<36} {'Product':<20} {'Qty':>4} {'Price':>11} {'Disc':>5} {'Total':>12}"
    )
    click.echo(f"  {'-'*93}")
    for item in dto.items:
        marker = " (cancelled)" if item.is_cancelled else ""
        click.echo(
            f"  {item.id:<36} {item.product_name:<20} {item.quantity:>4} "
            f"{item.unit_price:>11} {item.discount:>5} {item.total_price:>12}{marker}"
        )
    click.echo(f"  {'-'*93}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>63}")
    click.echo(f"  {'Discount':<30} {dto.total_discount:>63}")
    click.echo(f"  {'Sale Total':<30} {dto.total_amount:>63}")


def _display_item_result(result: SaleItemResultDTO) -> None:
    item = result.item
    click.echo(
        f"Item {item.id}: {item.quantity} x {item.product_name} at {item.unit_price} "
        f"(discount {item.discount}, total {item.total_price})"
    )
    click.echo(f"Sale total: {result.sale_total_amount}")


@click.command("create")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--branch", required=True, help="Branch ID.")
@click.option("--number", "sale_number", default=None, help="Sale number (generated if omitted).")
@click.option("--date", "sale_date", default=None, type=click.DateTime(), help="Sale date.")
def sale_create(
    customer: str, branch: str, sale_number: str | None, sale_date: datetime | None
) -> None:
    """Open a new draft sale."""
    handler = CreateSaleHandler(
        sale_repo=sale_repository(),
        dispatcher=event_dispatcher(),
        sale_number_prefix=sale_number_prefix(),
    )

    try:
        dto = handler.handle(
            customer_id=customer,
            branch_id=branch,
            sale_number=sale_number,
            sale_date=sale_date,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale {dto.sale_number} created  (id={dto.id}, status={dto.status})")


@click.command("show")
@click.option("--id", "sale_id", required=True, help="Sale ID or sale number.")
def sale_show(sale_id: str) -> None:
    """Show details of an existing sale."""
    handler = ShowSaleHandler(sale_repo=sale_repository())

    try:
        dto = handler.handle(sale_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_sale(dto)


@click.command("add-item")
@click.option("--id", "sale_id", required=True, help="Sale ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units of the product (1-20).")
@click.option("--price", default=None, help="Override the catalog unit price.")
def sale_add_item(sale_id: str, product_id: str, quantity: int, price: str | None) -> None:
    """Add a product line to a sale (reserves stock)."""
    handler = AddSaleItemHandler(
        sale_repo=sale_repository(),
        product_repo=product_repository(),
        dispatcher=event_dispatcher(),
    )

    try:
        result = handler.handle(sale_id, product_id, quantity, unit_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item_result(result)


@click.command("update-item")
@click.option("--id", "sale_id", required=True, help="Sale ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (1-20).")
def sale_update_item(sale_id: str, item_id: str, quantity: int) -> None:
    """Change an item's quantity (adjusts stock by the difference)."""
    handler = UpdateSaleItemHandler(
        sale_repo=sale_repository(),
        product_repo=product_repository(),
        dispatcher=event_dispatcher(),
    )

    try:
        result = handler.handle(sale_id, item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item_result(result)
    click.echo(f"Quantity difference: {result.quantity_difference:+d}")


@click.command("remove-item")
@click.option("--id", "sale_id", required=True, help="Sale ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--reason", default="", help="Why the item is removed.")
def sale_remove_item(sale_id: str, item_id: str, reason: str) -> None:
    """Cancel an item (returns its stock)."""
    handler = RemoveSaleItemHandler(
        sale_repo=sale_repository(),
        product_repo=product_repository(),
        dispatcher=event_dispatcher(),
    )

    try:
        result = handler.handle(sale_id, item_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Item {result.item_id} removed, {result.removed_quantity} units returned to stock."
    )
    click.echo(f"Sale total: {result.sale_total_amount}")


@click.command("confirm")
@click.option("--id", "sale_id", required=True, help="Sale ID to confirm.")
def sale_confirm(sale_id: str) -> None:
    """Confirm a draft sale."""
    handler = ConfirmSaleHandler(
        sale_repo=sale_repository(),
        dispatcher=event_dispatcher(),
    )

    try:
        dto = handler.handle(sale_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale {dto.sale_number} confirmed.")


@click.command("cancel")
@click.option("--id", "sale_id", required=True, help="Sale ID to cancel.")
@click.option("--reason", default="", help="Why the sale is cancelled.")
def sale_cancel(sale_id: str, reason: str) -> None:
    """Cancel a sale (returns the stock of every active item)."""
    handler = CancelSaleHandler(
        sale_repo=sale_repository(),
        product_repo=product_repository(),
        dispatcher=event_dispatcher(),
    )

    try:
        dto = handler.handle(sale_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale {dto.sale_number} cancelled.")
