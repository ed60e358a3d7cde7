"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from retail_sales.application.add_product import AddProductHandler
from retail_sales.application.list_products import ListProductsHandler
from retail_sales.application.restock_product import RestockProductHandler
from retail_sales.domain.exceptions import DomainException
from retail_sales.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", default=0, type=int, show_default=True, help="Initial stock.")
def product_add(name: str, price: str, stock: int) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        dto = handler.handle(name=name, price=price, stock_quantity=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} '{dto.name}' added at {dto.price} ({dto.stock_quantity} in stock)")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = ListProductsHandler(product_repo=product_repository()).handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Stock':>8}")
    click.echo("-" * 47)
    for p in products:
        marker = ""
        if not p.is_active:
            marker = "  (inactive)"
        elif not p.is_available:
            marker = "  (out of stock)"
        click.echo(f"{p.id:<6} {p.name:<20} {p.price:>10} {p.stock_quantity:>8}{marker}")


@click.command("restock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to add.")
def product_restock(product_id: str, quantity: int) -> None:
    """Add units to a product's stock."""
    handler = RestockProductHandler(product_repo=product_repository())

    try:
        dto = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} now has {dto.stock_quantity} in stock")
