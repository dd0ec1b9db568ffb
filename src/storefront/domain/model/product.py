"""Product aggregate.

Products are owned by the catalog collection of the store document.
They are never deleted; the only mutation after creation is a stock
adjustment, either set directly or reconciled by order changes.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


def _check_stock(stock: int) -> None:
    if not isinstance(stock, int) or isinstance(stock, bool):
        raise ValidationError(f"Stock must be an integer, got {type(stock).__name__}")
    if stock < 0:
        raise ValidationError(f"Stock cannot be negative, got {stock}")


@dataclass
class Product:
    """A product in the catalog.

    The identifier is chosen by the caller. ``stock`` is never negative;
    ``set_stock`` and ``adjust_stock`` reject any change that would make
    it so.
    """

    id: str
    name: str
    category: str
    retail_price: Money
    wholesale_price: Money
    stock: int = 0

    @staticmethod
    def create(
        id: str,
        name: str,
        category: str,
        retail_price: Money,
        wholesale_price: Money,
        stock: int = 0,
    ) -> Product:
        """Build a new catalog entry, enforcing all invariants."""
        if not id or not id.strip():
            raise ValidationError("Product ID is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_stock(stock)
        return Product(
            id=id.strip(),
            name=name.strip(),
            category=(category or "").strip(),
            retail_price=retail_price,
            wholesale_price=wholesale_price,
            stock=stock,
        )

    # --- Stock ----------------------------------------------------------------

    def set_stock(self, new_stock: int) -> None:
        _check_stock(new_stock)
        self.stock = new_stock

    def adjust_stock(self, delta: int) -> None:
        """Add ``delta`` (which may be negative) to the stock level."""
        if self.stock + delta < 0:
            raise ValidationError(
                f"Insufficient stock for {self.id} "
                f"(need {-delta}, have {self.stock})"
            )
        self.stock += delta

    # --- Queries --------------------------------------------------------------

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def is_low_stock(self, threshold: int) -> bool:
        """Low but not exhausted: ``0 < stock <= threshold``."""
        return 0 < self.stock <= threshold

    def in_category(self, category: str) -> bool:
        return self.category.casefold() == category.strip().casefold()
