"""End-to-end tests of the command-line interface against a temp data dir."""

import re

import pytest
from click.testing import CliRunner

from retail_sales.config import get_settings
from retail_sales.infrastructure import bootstrap
from retail_sales.infrastructure.cli.main import cli


def _clear_caches() -> None:
    get_settings.cache_clear()
    bootstrap.product_repository.cache_clear()
    bootstrap.sale_repository.cache_clear()
    bootstrap.event_dispatcher.cache_clear()


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("RETAIL_SALES_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RETAIL_SALES_SALE_NUMBER_PREFIX", "POS")
    _clear_caches()
    yield CliRunner()
    _clear_caches()


def _create_sale(runner, number="S-1") -> str:
    result = runner.invoke(
        cli, ["sale", "create", "--customer", "c-1", "--branch", "b-1", "--number", number]
    )
    assert result.exit_code == 0, result.output
    return re.search(r"id=([0-9a-f-]+)", result.output).group(1)


class TestProductCommands:

    def test_add_and_list(self, runner):
        result = runner.invoke(
            cli, ["product", "add", "--name", "Widget", "--price", "100.00", "--stock", "30"]
        )
        assert result.exit_code == 0, result.output
        assert "Product #1 'Widget' added at $100.00 (30 in stock)" in result.output

        result = runner.invoke(cli, ["product", "list"])
        assert "Widget" in result.output

    def test_list_empty(self, runner):
        result = runner.invoke(cli, ["product", "list"])
        assert "No products found." in result.output

    def test_restock(self, runner):
        runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "1.00"])
        result = runner.invoke(cli, ["product", "restock", "--id", "1", "--quantity", "5"])
        assert result.exit_code == 0, result.output
        assert "now has 5 in stock" in result.output


class TestSaleCommands:

    def test_generated_number_uses_configured_prefix(self, runner):
        result = runner.invoke(cli, ["sale", "create", "--customer", "c-1", "--branch", "b-1"])
        assert result.exit_code == 0, result.output
        assert re.search(r"Sale POS-\d{8}-[0-9a-f]{8} created", result.output)

    def test_full_flow(self, runner):
        runner.invoke(
            cli, ["product", "add", "--name", "Widget", "--price", "100.00", "--stock", "30"]
        )
        sale_id = _create_sale(runner)

        result = runner.invoke(
            cli, ["sale", "add-item", "--id", sale_id, "--product", "1", "--quantity", "5"]
        )
        assert result.exit_code == 0, result.output
        assert "Sale total: $450.00" in result.output
        item_id = re.search(r"Item ([0-9a-f-]+):", result.output).group(1)

        result = runner.invoke(
            cli, ["sale", "update-item", "--id", sale_id, "--item", item_id, "--quantity", "10"]
        )
        assert result.exit_code == 0, result.output
        assert "Quantity difference: +5" in result.output

        result = runner.invoke(cli, ["sale", "confirm", "--id", sale_id])
        assert "Sale S-1 confirmed." in result.output

        result = runner.invoke(cli, ["sale", "show", "--id", "S-1"])
        assert "status=CONFIRMED" in result.output
        assert "$800.00" in result.output

        result = runner.invoke(cli, ["sale", "cancel", "--id", sale_id, "--reason", "test"])
        assert "Sale S-1 cancelled." in result.output

        result = runner.invoke(cli, ["product", "list"])
        assert re.search(r"Widget\s+\$100.00\s+30", result.output)

    def test_domain_error_becomes_cli_error(self, runner):
        runner.invoke(
            cli, ["product", "add", "--name", "Widget", "--price", "100.00", "--stock", "30"]
        )
        sale_id = _create_sale(runner)
        result = runner.invoke(
            cli, ["sale", "add-item", "--id", sale_id, "--product", "1", "--quantity", "21"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_remove_item(self, runner):
        runner.invoke(
            cli, ["product", "add", "--name", "Widget", "--price", "10.00", "--stock", "30"]
        )
        sale_id = _create_sale(runner)
        result = runner.invoke(
            cli, ["sale", "add-item", "--id", sale_id, "--product", "1", "--quantity", "3"]
        )
        item_id = re.search(r"Item ([0-9a-f-]+):", result.output).group(1)

        result = runner.invoke(cli, ["sale", "remove-item", "--id", sale_id, "--item", item_id])
        assert result.exit_code == 0, result.output
        assert "3 units returned to stock" in result.output

    def test_show_unknown_sale(self, runner):
        result = runner.invoke(cli, ["sale", "show", "--id", "nope"])
        assert result.exit_code == 1
        assert "Sale 'nope' not found" in result.output


class TestProductListing:

    def test_out_of_stock_is_flagged(self, runner):
        runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "1.00"])
        result = runner.invoke(cli, ["product", "list"])
        assert "(out of stock)" in result.output
