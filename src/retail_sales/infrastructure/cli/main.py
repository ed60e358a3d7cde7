import click

from retail_sales.config import get_settings
from retail_sales.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_restock,
)
from retail_sales.infrastructure.cli.sale_commands import (
    sale_add_item,
    sale_cancel,
    sale_confirm,
    sale_create,
    sale_remove_item,
    sale_show,
    sale_update_item,
)
from retail_sales.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """Retail sales with quantity discounts and stock tracking."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@cli.group()
def sale() -> None:
    """Manage sales."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
sale.add_command(sale_add_item)
sale.add_command(sale_cancel)
sale.add_command(sale_confirm)
sale.add_command(sale_create)
sale.add_command(sale_remove_item)
sale.add_command(sale_show)
sale.add_command(sale_update_item)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_restock)
