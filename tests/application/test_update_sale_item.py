"""Integration tests for the UpdateSaleItem use case."""

import pytest

from retail_sales.application.add_sale_item import AddSaleItemHandler
from retail_sales.application.cancel_sale import CancelSaleHandler
from retail_sales.application.create_sale import CreateSaleHandler
from retail_sales.application.event_dispatcher import DomainEventDispatcher
from retail_sales.application.update_sale_item import UpdateSaleItemHandler
from retail_sales.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStock,
    InvalidQuantity,
    ItemNotFound,
    QuantityLimitExceeded,
    SaleCancelled,
)
from retail_sales.domain.model.product import Product
from retail_sales.domain.model.value_objects import Money
from tests.fakes import FakeProductRepository, FakeSaleRepository, RecordingEventPublisher


def _setup(stock: int = 30):
    """A sale holding 3 x Widget ($100.00 each, no discount)."""
    sale_repo = FakeSaleRepository()
    product_repo = FakeProductRepository(
        [Product(id="1", name="Widget", price=Money.of("100.00"), stock_quantity=stock)]
    )
    publisher = RecordingEventPublisher()
    dispatcher = DomainEventDispatcher(publisher)
    sale_id = CreateSaleHandler(sale_repo, dispatcher).handle("customer-1", "branch-1", "S-1").id
    item_id = AddSaleItemHandler(sale_repo, product_repo, dispatcher).handle(sale_id, "1", 3).item.id
    product_repo.adjustments.clear()
    publisher.events.clear()
    handler = UpdateSaleItemHandler(sale_repo, product_repo, dispatcher)
    return handler, sale_id, item_id, sale_repo, product_repo, publisher


class TestUpdateQuantity:

    def test_increase_debits_difference(self):
        handler, sale_id, item_id, _, product_repo, _ = _setup()
        result = handler.handle(sale_id, item_id, 10)
        assert result.quantity_difference == 7
        assert product_repo.adjustments == [("1", -7)]
        assert product_repo.stock_of("1") == 20

    def test_decrease_returns_difference(self):
        handler, sale_id, item_id, _, product_repo, _ = _setup()
        result = handler.handle(sale_id, item_id, 1)
        assert result.quantity_difference == -2
        assert product_repo.adjustments == [("1", 2)]
        assert product_repo.stock_of("1") == 29

    def test_same_quantity_touches_no_stock(self):
        handler, sale_id, item_id, _, product_repo, _ = _setup()
        result = handler.handle(sale_id, item_id, 3)
        assert result.quantity_difference == 0
        assert product_repo.adjustments == []

    def test_discount_is_rederived(self):
        handler, sale_id, item_id, _, _, _ = _setup()
        result = handler.handle(sale_id, item_id, 10)
        assert result.item.discount == "20%"
        assert result.item.total_price == "$800.00"
        assert result.sale_total_amount == "$800.00"

    def test_publishes_sale_modified(self):
        handler, sale_id, item_id, _, _, publisher = _setup()
        handler.handle(sale_id, item_id, 5)
        assert publisher.names == ["SaleModified"]
        assert publisher.events[0].modification_type == "ItemQuantityUpdated"

    def test_persists_new_quantity(self):
        handler, sale_id, item_id, sale_repo, _, _ = _setup()
        handler.handle(sale_id, item_id, 5)
        assert sale_repo.get_by_id(sale_id).items[0].quantity == 5


class TestUpdateQuantityFailures:

    def test_unknown_sale(self):
        handler, _, item_id, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("missing", item_id, 5)

    def test_unknown_item(self):
        handler, sale_id, _, _, product_repo, _ = _setup()
        with pytest.raises(ItemNotFound):
            handler.handle(sale_id, "no-such-item", 5)
        assert product_repo.adjustments == []

    @pytest.mark.parametrize(
        "quantity, error", [(0, InvalidQuantity), (21, QuantityLimitExceeded)]
    )
    def test_invalid_quantity(self, quantity, error):
        handler, sale_id, item_id, _, product_repo, _ = _setup()
        with pytest.raises(error):
            handler.handle(sale_id, item_id, quantity)
        assert product_repo.adjustments == []

    def test_not_enough_stock_for_increase(self):
        # 3 already taken from 5, only 2 left on the shelf
        handler, sale_id, item_id, sale_repo, product_repo, publisher = _setup(stock=5)
        with pytest.raises(InsufficientStock):
            handler.handle(sale_id, item_id, 6)
        assert product_repo.adjustments == []
        assert sale_repo.get_by_id(sale_id).items[0].quantity == 3
        assert publisher.events == []

    def test_store_refusal_rolls_back(self):
        handler, sale_id, item_id, sale_repo, product_repo, publisher = _setup()
        saves_before = sale_repo.save_count
        product_repo.refuse_reservations = True

        with pytest.raises(InsufficientStock):
            handler.handle(sale_id, item_id, 8)

        item = sale_repo.get_by_id(sale_id).items[0]
        assert item.quantity == 3
        assert not item.discount.is_applied
        assert sale_repo.save_count == saves_before
        assert publisher.events == []

    def test_cancelled_sale_reports_cancellation_not_missing_item(self):
        handler, sale_id, item_id, sale_repo, product_repo, publisher = _setup()
        CancelSaleHandler(
            sale_repo, product_repo, DomainEventDispatcher(RecordingEventPublisher())
        ).handle(sale_id)
        product_repo.adjustments.clear()

        with pytest.raises(SaleCancelled):
            handler.handle(sale_id, item_id, 6)

        assert product_repo.adjustments == []
        assert publisher.events == []
