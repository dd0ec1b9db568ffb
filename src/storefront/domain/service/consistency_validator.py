"""Domain service: cross-entity consistency checks for orders.

These checks run against the in-memory document snapshot loaded inside
the same exclusive section as the mutation that follows them, so the
view they validate is the view that gets written.

Checks are pure: nothing here mutates the document. Order repositories
call ``check_order`` first and only then apply stock changes, so a
failed check never leaves stock partially adjusted.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from storefront.domain.exceptions import ReferentialError, ValidationError
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument


def missing_products(
    product_ids: Iterable[str], product_index: Mapping[str, Product]
) -> list[str]:
    """Return the referenced product IDs absent from the index, in order."""
    missing: list[str] = []
    for product_id in product_ids:
        if product_id.casefold() not in product_index and product_id not in missing:
            missing.append(product_id)
    return missing


def customer_exists(customer_id: str, customer_index: Mapping[str, Customer]) -> bool:
    return customer_id.casefold() in customer_index


def stock_deltas(previous: Order | None, replacement: Order) -> Counter[str]:
    """Extra units each product must supply when ``previous`` becomes ``replacement``.

    Negative values are units handed back to stock.
    """
    deltas = replacement.quantities_by_product()
    if previous is not None:
        deltas.subtract(previous.quantities_by_product())
    return Counter({pid: qty for pid, qty in deltas.items() if qty != 0})


class ConsistencyValidator:

    def check_order(
        self,
        order: Order,
        document: StoreDocument,
        previous: Order | None = None,
    ) -> Counter[str]:
        """Validate references and stock for a new or replaced order.

        Returns the per-product stock deltas the caller must apply.
        """
        if not customer_exists(order.customer_id, document.customer_index()):
            raise ReferentialError(f"Customer not found: '{order.customer_id}'")

        product_index = document.product_index()
        missing = missing_products((i.product_id for i in order.items), product_index)
        if missing:
            raise ReferentialError(
                "Order references unknown products: " + ", ".join(missing)
            )

        deltas = stock_deltas(previous, order)
        for product_key, needed in deltas.items():
            product = product_index.get(product_key)
            if product is None or needed <= 0:
                continue
            if needed > product.stock:
                raise ValidationError(
                    f"Insufficient stock for {product.id} "
                    f"(need {needed}, have {product.stock})"
                )
        return deltas
