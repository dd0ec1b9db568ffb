"""Document-backed implementation of OrderRepository.

Order writes span entity types: the customer and every product must
exist, unit prices are snapshotted from the catalog, the total is
recomputed from the items, and product stock moves with the ordered
quantities. All of it happens on the document loaded inside the same
exclusive section, so checks and writes see one consistent view.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, as_utc
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.document_store import DocumentStore
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.consistency_validator import ConsistencyValidator
from storefront.infrastructure.persistence.document_repository import (
    DocumentRepository,
)
from storefront.infrastructure.persistence.identifiers import (
    ORDER_PREFIX,
    IdentifierGenerator,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JsonOrderRepository(DocumentRepository[Order], OrderRepository):

    entity_name = "order"

    def __init__(
        self,
        store: DocumentStore,
        ids: IdentifierGenerator | None = None,
        clock: Callable[[], datetime] = utc_now,
        validator: ConsistencyValidator | None = None,
    ) -> None:
        super().__init__(store)
        self._ids = ids or IdentifierGenerator()
        self._clock = clock
        self._validator = validator or ConsistencyValidator()

    # --- OrderRepository interface --------------------------------------------

    def get_by_customer_id(
        self, customer_id: str, cancel: threading.Event | None = None
    ) -> list[Order]:
        return self.find(lambda o: o.belongs_to(customer_id), cancel)

    def get_by_status(
        self, status: str, cancel: threading.Event | None = None
    ) -> list[Order]:
        return self.find(lambda o: o.has_status(status), cancel)

    def get_by_date_range(
        self,
        start: datetime,
        end: datetime,
        cancel: threading.Event | None = None,
    ) -> list[Order]:
        if as_utc(start) > as_utc(end):
            raise ValidationError("Start date must not be after end date")
        return self.find(lambda o: o.created_between(start, end), cancel)

    def update_status(
        self, order_id: str, status: str, cancel: threading.Event | None = None
    ) -> Order:
        if not status or not status.strip():
            raise ValidationError("Order status is required")

        def change(existing: Order, document: StoreDocument) -> Order:
            return replace(existing, status=status.strip())

        return self._modify(order_id, change, cancel)

    # --- Engine hooks ---------------------------------------------------------

    def _collection(self, document: StoreDocument) -> list[Order]:
        return document.orders

    def _key(self, order: Order) -> str:
        return order.id

    def _prepare_new(self, candidate: Order, document: StoreDocument) -> Order:
        # Caller-supplied IDs and timestamps are ignored.
        order_id = self._ids.next_unique(ORDER_PREFIX, self._taken_keys(document))
        return self._build(order_id, candidate, self._clock(), document, previous=None)

    def _apply_update(
        self, existing: Order, candidate: Order, document: StoreDocument
    ) -> Order:
        return self._build(
            existing.id, candidate, existing.created_at, document, previous=existing
        )

    # --- Internal helpers -----------------------------------------------------

    def _build(
        self,
        order_id: str,
        candidate: Order,
        created_at: datetime | None,
        document: StoreDocument,
        previous: Order | None,
    ) -> Order:
        """Validate ``candidate`` and return the order to persist.

        Phase 1 checks structure, references and stock without touching
        the document. Phase 2 snapshots prices and moves stock.
        """
        draft = Order.create(
            id=order_id,
            customer_id=candidate.customer_id,
            items=candidate.items,
            status=candidate.status,
            created_at=created_at,
        )
        deltas = self._validator.check_order(draft, document, previous)

        product_index = document.product_index()
        kept = previous.price_snapshots() if previous is not None else {}
        items = []
        for item in draft.items:
            key = item.product_id.casefold()
            price = kept[key] if key in kept else product_index[key].retail_price
            items.append(replace(item, product_id=product_index[key].id, unit_price=price))

        order = Order.create(
            id=order_id,
            customer_id=draft.customer_id,
            items=items,
            status=draft.status,
            created_at=created_at,
        )
        for key, delta in deltas.items():
            product = product_index.get(key)
            if product is not None:
                product.adjust_stock(-delta)
        return order
