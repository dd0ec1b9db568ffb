"""Abstract repository for the Product aggregate."""

from __future__ import annotations

import threading
from abc import abstractmethod

from storefront.domain.model.product import Product
from storefront.domain.repository.entity_repository import EntityRepository

DEFAULT_LOW_STOCK_THRESHOLD = 5


class ProductRepository(EntityRepository[Product]):

    @abstractmethod
    def get_by_category(
        self, category: str, cancel: threading.Event | None = None
    ) -> list[Product]:
        """Return products whose category matches, ignoring case."""

    @abstractmethod
    def get_in_stock(self, cancel: threading.Event | None = None) -> list[Product]:
        """Return products with stock greater than zero."""

    @abstractmethod
    def get_low_stock(
        self,
        threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        cancel: threading.Event | None = None,
    ) -> list[Product]:
        """Return products with ``0 < stock <= threshold``."""

    @abstractmethod
    def update_stock(
        self, product_id: str, new_stock: int, cancel: threading.Event | None = None
    ) -> Product:
        """Set a product's stock level."""
