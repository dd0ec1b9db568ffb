"""Abstract mapping between entities and JSON-like records.

Callers that exchange plain data with the outside world (the operation
dispatcher) depend on this interface; the wire format itself lives in
infrastructure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


class RecordCodec(ABC):

    @abstractmethod
    def product_from_record(self, raw: Any) -> Product:
        """Decode a product; raises FormatError on schema violations."""

    @abstractmethod
    def order_from_record(self, raw: Any, require_id: bool = True) -> Order:
        """Decode an order, optionally without an identifier."""

    @abstractmethod
    def customer_from_record(self, raw: Any, require_id: bool = True) -> Customer:
        """Decode a customer, optionally without an identifier."""

    @abstractmethod
    def product_to_record(self, product: Product) -> dict:
        ...

    @abstractmethod
    def order_to_record(self, order: Order) -> dict:
        ...

    @abstractmethod
    def customer_to_record(self, customer: Customer) -> dict:
        ...
