"""Sale aggregate, the core of the domain.

The Sale is an aggregate root that owns its line items.  All business
invariants are enforced here.  The aggregate never talks to a repository:
operations that affect stock return what the caller needs to settle it
(see ``StockCoordinator``).

Items are never deleted.  Removing an item, or cancelling the whole sale,
only marks items cancelled, so the item list doubles as an audit trail and
the total is always a plain fold over the active items.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from retail_sales.domain.exceptions import (
    AlreadyCancelled,
    AlreadyConfirmed,
    DuplicateProductInSale,
    InsufficientStock,
    ItemNotFound,
    SaleCancelled,
    ValidationError,
)
from retail_sales.domain.model.events import (
    DomainEvent,
    ItemCancelled,
    SaleCancelled as SaleCancelledEvent,
    SaleCreated,
    SaleModified,
)
from retail_sales.domain.model.product import Product
from retail_sales.domain.model.value_objects import Discount, Money
from retail_sales.domain.service.discount_engine import (
    calculate_discount,
    validate_quantity_limits,
)

MAX_DISTINCT_PRODUCTS = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SaleStatus(Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


@dataclass
class SaleItem:
    """One product line within a sale.

    ``unit_price`` is a snapshot taken when the item is added.  The
    discount is always derived from the quantity and that unit price,
    never set on its own.
    """

    id: str
    sale_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Money
    discount: Discount
    is_cancelled: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    @staticmethod
    def create(sale_id: str, product: Product, quantity: int, unit_price: Money) -> SaleItem:
        discount = calculate_discount(quantity, unit_price.amount)
        return SaleItem(
            id=str(uuid.uuid4()),
            sale_id=sale_id,
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=unit_price,
            discount=discount,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def discount_amount(self) -> Money:
        return Money(self.discount.amount, self.unit_price.currency)

    @property
    def total_price(self) -> Money:
        return self.subtotal - self.discount_amount

    # --- Mutations (called by Sale only) --------------------------------------

    def change_quantity(self, new_quantity: int) -> None:
        if self.is_cancelled:
            raise ValidationError("Cannot update quantity of a cancelled item")
        # Compute first so a failure leaves the item untouched.
        discount = calculate_discount(new_quantity, self.unit_price.amount)
        self.quantity = new_quantity
        self.discount = discount
        self.updated_at = _utcnow()

    def cancel(self) -> None:
        self.is_cancelled = True
        self.updated_at = _utcnow()


@dataclass(frozen=True)
class QuantityChange:
    """Outcome of a quantity update; ``difference`` is signed."""

    item_id: str
    product_id: str
    previous_quantity: int
    new_quantity: int

    @property
    def difference(self) -> int:
        return self.new_quantity - self.previous_quantity


@dataclass(frozen=True)
class StockRelease:
    """Units that went back on the shelf when an item was cancelled."""

    item_id: str
    product_id: str
    product_name: str
    quantity: int


@dataclass
class Sale:
    """Aggregate root for sales.

    Use the ``Sale.create()`` factory for new sales; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted sales without re-validating.
    """

    id: str
    sale_number: str
    customer_id: str
    branch_id: str
    sale_date: datetime
    items: list[SaleItem] = field(default_factory=list)
    status: SaleStatus = SaleStatus.DRAFT
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None
    _events: list[DomainEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    # --- Factory (used for NEW sales only) ------------------------------------

    @staticmethod
    def create(
        customer_id: str,
        branch_id: str,
        sale_number: str,
        sale_date: datetime | None = None,
    ) -> Sale:
        """Create a new draft sale, enforcing all invariants."""
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer is required")
        if not branch_id or not branch_id.strip():
            raise ValidationError("Branch is required")
        if not sale_number or not sale_number.strip():
            raise ValidationError("Sale number is required")

        sale = Sale(
            id=str(uuid.uuid4()),
            sale_number=sale_number.strip(),
            customer_id=customer_id.strip(),
            branch_id=branch_id.strip(),
            sale_date=sale_date or _utcnow(),
        )
        sale._raise(
            SaleCreated(
                sale_id=sale.id,
                sale_number=sale.sale_number,
                customer_id=sale.customer_id,
                branch_id=sale.branch_id,
                sale_date=sale.sale_date,
                total_amount=sale.total_amount.amount,
                item_count=0,
            )
        )
        return sale

    # --- Item operations ------------------------------------------------------

    def add_item(
        self,
        product: Product,
        quantity: int,
        unit_price: Money | None = None,
    ) -> SaleItem:
        """Append a new line for *product*.

        A positive *unit_price* overrides the product's current price and
        the discount is computed against whichever price is charged.
        The stock check here is a pre-flight estimate; the product store
        has the final word.
        """
        self._ensure_not_cancelled()
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is not available for sale")

        price = unit_price if unit_price is not None and unit_price.amount > 0 else product.price
        item = SaleItem.create(self.id, product, quantity, price)

        if self._find_active_by_product(product.id) is not None:
            raise DuplicateProductInSale(
                f"Product '{product.name}' is already in this sale; "
                f"update the existing item's quantity instead"
            )
        if len({i.product_id for i in self.active_items}) >= MAX_DISTINCT_PRODUCTS:
            raise ValidationError(
                f"Cannot add more than {MAX_DISTINCT_PRODUCTS} different products to a sale"
            )
        if product.stock_quantity < quantity:
            raise InsufficientStock(
                f"Insufficient stock for {product.name} "
                f"(need {quantity}, have {product.stock_quantity} available)"
            )

        self.items.append(item)
        self._touch()
        self._modified("ItemAdded", f"{quantity} x {product.name}")
        return item

    def update_item_quantity(
        self, item_id: str, new_quantity: int, product: Product
    ) -> QuantityChange:
        """Change an active item's quantity and re-derive its discount.

        Returns the signed difference so the caller can adjust stock once.
        """
        self._ensure_not_cancelled()
        item = self.find_active_item(item_id)
        validate_quantity_limits(new_quantity)

        if product.id != item.product_id:
            raise ValidationError(
                f"Product '{product.id}' does not match item product '{item.product_id}'"
            )

        change = QuantityChange(
            item_id=item.id,
            product_id=item.product_id,
            previous_quantity=item.quantity,
            new_quantity=new_quantity,
        )
        if change.difference > 0 and product.stock_quantity < change.difference:
            raise InsufficientStock(
                f"Insufficient stock for {product.name} "
                f"(need {change.difference} more, have {product.stock_quantity} available)"
            )

        item.change_quantity(new_quantity)
        self._touch()
        self._modified(
            "ItemQuantityUpdated",
            f"{item.product_name}: {change.previous_quantity} -> {new_quantity}",
        )
        return change

    def remove_item(self, item_id: str, reason: str = "") -> StockRelease:
        """Cancel an active item; it stays in ``items`` for the record."""
        self._ensure_not_cancelled()
        item = self.find_active_item(item_id)

        item.cancel()
        self._touch()
        self._raise(self._item_cancelled(item, reason))
        self._modified("ItemRemoved", f"{item.quantity} x {item.product_name}")
        return StockRelease(item.id, item.product_id, item.product_name, item.quantity)

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition DRAFT -> CONFIRMED.  A sale needs at least one active item."""
        if self.status == SaleStatus.CANCELLED:
            raise AlreadyCancelled(
                f"Sale {self.sale_number} is cancelled and can not be confirmed"
            )
        if self.status == SaleStatus.CONFIRMED:
            raise AlreadyConfirmed(f"Sale {self.sale_number} is already confirmed")
        if not self.has_items:
            raise ValidationError(f"Cannot confirm sale {self.sale_number} without items")
        self.status = SaleStatus.CONFIRMED
        self._touch()
        self._modified("Confirmed", "")

    def cancel(self, reason: str = "") -> list[StockRelease]:
        """Transition DRAFT|CONFIRMED -> CANCELLED.

        Every active item is cancelled as well.  Returns what each of
        them held so the caller can put the stock back.
        """
        if self.status == SaleStatus.CANCELLED:
            raise AlreadyCancelled(f"Sale {self.sale_number} is already cancelled")

        original_total = self.total_amount
        original_count = self.active_item_count

        released: list[StockRelease] = []
        for item in self.active_items:
            item.cancel()
            self._raise(self._item_cancelled(item, reason or "Sale cancelled"))
            released.append(
                StockRelease(item.id, item.product_id, item.product_name, item.quantity)
            )

        self.status = SaleStatus.CANCELLED
        self._touch()
        self._raise(
            SaleCancelledEvent(
                sale_id=self.id,
                sale_number=self.sale_number,
                customer_id=self.customer_id,
                branch_id=self.branch_id,
                original_total_amount=original_total.amount,
                original_item_count=original_count,
                reason=reason,
            )
        )
        return released

    @contextmanager
    def pending_change(self) -> Iterator[Sale]:
        """Undo every change made inside the block if it raises.

        Used by the application layer so that a failed stock call leaves
        no trace on the in-memory sale.
        """
        saved = copy.deepcopy((self.items, self.status, self.updated_at, self._events))
        try:
            yield self
        except Exception:
            self.items, self.status, self.updated_at, self._events = saved
            raise

    # --- Events ---------------------------------------------------------------

    def pull_events(self) -> list[DomainEvent]:
        """Return and clear the events raised since the last pull."""
        events = list(self._events)
        self._events.clear()
        return events

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    # --- Computed properties --------------------------------------------------

    @property
    def active_items(self) -> list[SaleItem]:
        return [item for item in self.items if not item.is_cancelled]

    @property
    def total_amount(self) -> Money:
        return self._sum(item.total_price for item in self.active_items)

    @property
    def subtotal(self) -> Money:
        return self._sum(item.subtotal for item in self.active_items)

    @property
    def total_discount(self) -> Money:
        return self._sum(item.discount_amount for item in self.active_items)

    @property
    def active_item_count(self) -> int:
        return len(self.active_items)

    @property
    def has_items(self) -> bool:
        return self.active_item_count > 0

    @property
    def is_cancelled(self) -> bool:
        return self.status == SaleStatus.CANCELLED

    def find_active_item(self, item_id: str) -> SaleItem:
        for item in self.items:
            if item.id == item_id and not item.is_cancelled:
                return item
        raise ItemNotFound(f"Item '{item_id}' not found in sale {self.sale_number}")

    # --- Internal helpers -----------------------------------------------------

    def _find_active_by_product(self, product_id: str) -> SaleItem | None:
        for item in self.active_items:
            if item.product_id == product_id:
                return item
        return None

    def _ensure_not_cancelled(self) -> None:
        if self.status == SaleStatus.CANCELLED:
            raise SaleCancelled(f"Sale {self.sale_number} is cancelled")

    def _sum(self, amounts: Iterable[Money]) -> Money:
        result: Money | None = None
        for amount in amounts:
            result = amount if result is None else result + amount
        return result if result is not None else Money.zero()

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def _raise(self, event: DomainEvent) -> None:
        self._events.append(event)

    def _modified(self, modification_type: str, details: str) -> None:
        self._raise(
            SaleModified(
                sale_id=self.id,
                sale_number=self.sale_number,
                modification_type=modification_type,
                details=details,
                total_amount=self.total_amount.amount,
                item_count=self.active_item_count,
            )
        )

    def _item_cancelled(self, item: SaleItem, reason: str) -> ItemCancelled:
        return ItemCancelled(
            sale_id=self.id,
            sale_number=self.sale_number,
            item_id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price.amount,
            discount_percentage=item.discount.percentage,
            total_price=item.total_price.amount,
            reason=reason,
        )
