"""StoreDocument: the single persisted aggregate.

Every mutation reads the whole document and writes the whole document
back, so this is the unit of atomicity for the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


@dataclass
class StoreDocument:
    products: list[Product] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)

    def product_index(self) -> dict[str, Product]:
        """Products keyed by case-folded identifier."""
        return {p.id.casefold(): p for p in self.products}

    def customer_index(self) -> dict[str, Customer]:
        """Customers keyed by case-folded identifier."""
        return {c.id.casefold(): c for c in self.customers}
