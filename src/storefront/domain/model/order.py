"""Order aggregate.

The Order owns its items. Each item carries a unit price snapshot
taken when the product was first placed on the order, so later catalog
price changes never alter existing orders.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity

DEFAULT_STATUS = "Pending"


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    quantity: Quantity
    unit_price: Money  # locked when the product joined the order

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` to build the persisted form of a new or
    replaced order; it enforces the item rules and recomputes
    ``total_amount``. The plain ``__init__`` is used by the codec to
    reconstitute stored orders and by callers to describe candidates.
    """

    id: str
    customer_id: str
    items: list[OrderItem]
    status: str = DEFAULT_STATUS
    total_amount: Money = Money.zero()
    created_at: datetime | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        id: str,
        customer_id: str,
        items: list[OrderItem],
        status: str,
        created_at: datetime | None,
    ) -> Order:
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer ID is required")
        if not items:
            raise ValidationError("Order must contain at least one item")
        for item in items:
            if not item.product_id or not item.product_id.strip():
                raise ValidationError("Every order item needs a product ID")

        order = Order(
            id=id,
            customer_id=customer_id.strip(),
            items=list(items),
            status=(status or "").strip() or DEFAULT_STATUS,
            created_at=created_at,
        )
        order.total_amount = order.computed_total
        return order

    # --- Computed properties --------------------------------------------------

    @property
    def computed_total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    def quantities_by_product(self) -> Counter[str]:
        """Total quantity per product, keyed by case-folded product ID."""
        totals: Counter[str] = Counter()
        for item in self.items:
            totals[item.product_id.casefold()] += item.quantity.value
        return totals

    def price_snapshots(self) -> dict[str, Money]:
        return {item.product_id.casefold(): item.unit_price for item in self.items}

    # --- Predicates -----------------------------------------------------------

    def has_status(self, status: str) -> bool:
        return self.status.casefold() == status.strip().casefold()

    def belongs_to(self, customer_id: str) -> bool:
        return self.customer_id.casefold() == customer_id.strip().casefold()

    def created_between(self, start: datetime, end: datetime) -> bool:
        if self.created_at is None:
            return False
        return as_utc(start) <= as_utc(self.created_at) <= as_utc(end)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
