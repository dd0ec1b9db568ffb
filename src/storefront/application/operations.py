"""Application service: repository operations addressable by name.

This is the narrow interface consumed by the request and protocol
layers. A caller names an entity type (``products``, ``orders``,
``customers``) and an operation (``GetLowStockProducts``, ``AddOrder``,
...) and passes JSON-like parameters in lower camel case. The result is
a domain entity, a list of them, or ``None``; ``render`` turns any of
those into record data through the injected RecordCodec.

Malformed parameters raise ValidationError. Errors from the
repositories propagate unchanged.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from storefront.domain.exceptions import (
    FormatError,
    UnsupportedOperationError,
    ValidationError,
)
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.customer_repository import CustomerRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    ProductRepository,
)
from storefront.domain.repository.record_codec import RecordCodec

logger = logging.getLogger(__name__)


class Params:
    """Case-insensitive accessor over an operation's parameters."""

    def __init__(self, raw: Mapping[str, Any] | None) -> None:
        self._values = {str(k).lower(): v for k, v in (raw or {}).items()}

    def _get(self, name: str) -> Any:
        return self._values.get(name.lower())

    def text(self, name: str) -> str:
        value = self._get(name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Parameter '{name}' must be a non-empty string")
        return value

    def integer(self, name: str, default: int | None = None) -> int:
        value = self._get(name)
        if value is None and default is not None:
            return default
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                pass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(f"Parameter '{name}' must be an integer")
        return value

    def moment(self, name: str) -> datetime:
        value = self._get(name)
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                pass
        raise ValidationError(f"Parameter '{name}' must be an ISO 8601 date or datetime")

    def entity(self, name: str, decode: Callable[[Any], Any]) -> Any:
        value = self._get(name)
        if value is None:
            raise ValidationError(f"Parameter '{name}' is required")
        try:
            return decode(value)
        except FormatError as exc:
            raise ValidationError(f"Invalid '{name}': {exc}") from exc


Handler = Callable[[Params, threading.Event | None], Any]


class CatalogOperations:

    def __init__(
        self,
        products: ProductRepository,
        orders: OrderRepository,
        customers: CustomerRepository,
        codec: RecordCodec,
    ) -> None:
        self._codec = codec
        self._registry: dict[str, dict[str, Handler]] = {
            "products": {
                "GetAllProducts": lambda p, c: products.list_all(c),
                "GetProductsByCategory": lambda p, c: products.get_by_category(
                    p.text("category"), c
                ),
                "GetProductById": lambda p, c: products.get_by_id(p.text("productId"), c),
                "GetProductsInStock": lambda p, c: products.get_in_stock(c),
                "GetLowStockProducts": lambda p, c: products.get_low_stock(
                    p.integer("threshold", DEFAULT_LOW_STOCK_THRESHOLD), c
                ),
                "AddProduct": lambda p, c: products.add(
                    p.entity("product", codec.product_from_record), c
                ),
                "UpdateProductStock": lambda p, c: products.update_stock(
                    p.text("productId"), p.integer("newStock"), c
                ),
            },
            "orders": {
                "GetAllOrders": lambda p, c: orders.list_all(c),
                "GetOrderById": lambda p, c: orders.get_by_id(p.text("orderId"), c),
                "GetOrdersByCustomerId": lambda p, c: orders.get_by_customer_id(
                    p.text("customerId"), c
                ),
                "GetOrdersByStatus": lambda p, c: orders.get_by_status(p.text("status"), c),
                "GetOrdersByDateRange": lambda p, c: orders.get_by_date_range(
                    p.moment("startDate"), p.moment("endDate"), c
                ),
                "AddOrder": lambda p, c: orders.add(
                    p.entity("order", self._new_order), c
                ),
                "UpdateOrder": lambda p, c: orders.update(
                    p.entity("order", codec.order_from_record), c
                ),
            },
            "customers": {
                "GetAllCustomers": lambda p, c: customers.list_all(c),
                "GetCustomerById": lambda p, c: customers.get_by_id(
                    p.text("customerId"), c
                ),
                "GetCustomerByEmail": lambda p, c: customers.get_by_email(
                    p.text("email"), c
                ),
                "AddCustomer": lambda p, c: customers.add(
                    p.entity("customer", self._new_customer), c
                ),
                "UpdateCustomer": lambda p, c: customers.update(
                    p.entity("customer", codec.customer_from_record), c
                ),
            },
        }

    def operations(self) -> dict[str, list[str]]:
        """Operation names by entity type."""
        return {entity: list(ops) for entity, ops in self._registry.items()}

    def dispatch(
        self,
        entity_type: str,
        operation: str,
        params: Mapping[str, Any] | None = None,
        cancel: threading.Event | None = None,
    ) -> Any:
        handler = self._lookup(entity_type, operation)
        logger.debug("Dispatching %s.%s", entity_type, operation)
        return handler(Params(params), cancel)

    def _lookup(self, entity_type: str, operation: str) -> Handler:
        ops = self._registry.get(entity_type.strip().lower())
        if ops is None:
            raise UnsupportedOperationError(f"Unknown entity type: '{entity_type}'")
        for name, handler in ops.items():
            if name.lower() == operation.strip().lower():
                return handler
        raise UnsupportedOperationError(
            f"Unknown operation '{operation}' for {entity_type.strip().lower()}"
        )

    def render(self, result: Any) -> Any:
        """Render an operation result as JSON-ready data."""
        if result is None:
            return None
        if isinstance(result, list):
            return [self.render(item) for item in result]
        if isinstance(result, Product):
            return self._codec.product_to_record(result)
        if isinstance(result, Order):
            return self._codec.order_to_record(result)
        if isinstance(result, Customer):
            return self._codec.customer_to_record(result)
        raise TypeError(f"Cannot render {type(result).__name__}")

    def _new_order(self, raw: Any) -> Order:
        return self._codec.order_from_record(raw, require_id=False)

    def _new_customer(self, raw: Any) -> Customer:
        return self._codec.customer_from_record(raw, require_id=False)
