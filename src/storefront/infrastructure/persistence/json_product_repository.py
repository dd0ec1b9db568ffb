"""Document-backed implementation of ProductRepository."""

from __future__ import annotations

import threading

from storefront.domain.exceptions import ConflictError
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.product_repository import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    ProductRepository,
)
from storefront.infrastructure.persistence.document_repository import (
    DocumentRepository,
)


class JsonProductRepository(DocumentRepository[Product], ProductRepository):

    entity_name = "product"

    # --- ProductRepository interface ------------------------------------------

    def get_by_category(
        self, category: str, cancel: threading.Event | None = None
    ) -> list[Product]:
        return self.find(lambda p: p.in_category(category), cancel)

    def get_in_stock(self, cancel: threading.Event | None = None) -> list[Product]:
        return self.find(lambda p: p.in_stock, cancel)

    def get_low_stock(
        self,
        threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        cancel: threading.Event | None = None,
    ) -> list[Product]:
        return self.find(lambda p: p.is_low_stock(threshold), cancel)

    def update_stock(
        self, product_id: str, new_stock: int, cancel: threading.Event | None = None
    ) -> Product:
        def change(existing: Product, document: StoreDocument) -> Product:
            existing.set_stock(new_stock)
            return existing

        return self._modify(product_id, change, cancel)

    # --- Engine hooks ---------------------------------------------------------

    def _collection(self, document: StoreDocument) -> list[Product]:
        return document.products

    def _key(self, product: Product) -> str:
        return product.id

    def _prepare_new(self, candidate: Product, document: StoreDocument) -> Product:
        product = Product.create(
            id=candidate.id,
            name=candidate.name,
            category=candidate.category,
            retail_price=candidate.retail_price,
            wholesale_price=candidate.wholesale_price,
            stock=candidate.stock,
        )
        if product.id.casefold() in self._taken_keys(document):
            raise ConflictError(f"Product with ID '{product.id}' already exists")
        return product

    def _apply_update(
        self, existing: Product, candidate: Product, document: StoreDocument
    ) -> Product:
        # Only the stock level is replaceable.
        existing.set_stock(candidate.stock)
        return existing
