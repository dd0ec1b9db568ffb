"""Serialization between the store document and its JSON form.

Field names are written in lower camel case and matched
case-insensitively on read. Monetary amounts travel as JSON numbers
(decimal strings when a float cannot hold them exactly) and are parsed
straight into ``Decimal`` so no float rounding happens either way. Anything that cannot be mapped onto the schema raises
FormatError.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from decimal import Decimal
from typing import Any

from storefront.domain.exceptions import DomainException, FormatError
from storefront.domain.model.customer import Address, Customer
from storefront.domain.model.order import Order, OrderItem, as_utc
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.record_codec import RecordCodec


class _Fields:
    """Case-insensitive, type-checked view of one JSON object."""

    def __init__(self, raw: Any, kind: str) -> None:
        if not isinstance(raw, dict):
            raise FormatError(f"{kind} must be an object, got {type(raw).__name__}")
        self._kind = kind
        self._values = {str(key).lower(): value for key, value in raw.items()}

    def _get(self, name: str) -> Any:
        return self._values.get(name.lower())

    def required_text(self, name: str) -> str:
        value = self.text(name)
        if not value:
            raise FormatError(f"{self._kind} is missing '{name}'")
        return value

    def text(self, name: str) -> str:
        value = self._get(name)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise FormatError(f"{self._kind}.{name} must be a string")
        return value

    def integer(self, name: str) -> int:
        value = self._get(name)
        if value is None:
            return 0
        whole = isinstance(value, (Decimal, float)) and math.isfinite(value)
        if whole and value == int(value):
            return int(value)
        if not isinstance(value, int) or isinstance(value, bool):
            raise FormatError(f"{self._kind}.{name} must be an integer")
        return value

    def money(self, name: str) -> Money:
        value = self._get(name)
        if value is None:
            return Money.zero()
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
            raise FormatError(f"{self._kind}.{name} must be a number")
        try:
            return Money.of(value)
        except DomainException as exc:
            raise FormatError(f"{self._kind}.{name}: {exc}") from exc

    def timestamp(self, name: str) -> datetime | None:
        value = self._get(name)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise FormatError(f"{self._kind}.{name} must be an ISO 8601 string")
        try:
            return as_utc(datetime.fromisoformat(value))
        except ValueError as exc:
            raise FormatError(f"{self._kind}.{name}: invalid timestamp {value!r}") from exc

    def child(self, name: str) -> _Fields:
        value = self._get(name)
        return _Fields({} if value is None else value, f"{self._kind}.{name}")

    def objects(self, name: str) -> list[Any]:
        value = self._get(name)
        if value is None:
            return []
        if not isinstance(value, list):
            raise FormatError(f"{self._kind}.{name} must be a list")
        return value


# --- Products ---------------------------------------------------------------


def product_to_record(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "retailPrice": _number(product.retail_price),
        "wholesalePrice": _number(product.wholesale_price),
        "stock": product.stock,
    }


def product_from_record(raw: Any) -> Product:
    fields = _Fields(raw, "product")
    stock = fields.integer("stock")
    if stock < 0:
        raise FormatError(f"product.stock cannot be negative, got {stock}")
    return Product(
        id=fields.required_text("id"),
        name=fields.text("name"),
        category=fields.text("category"),
        retail_price=fields.money("retailPrice"),
        wholesale_price=fields.money("wholesalePrice"),
        stock=stock,
    )


# --- Orders -----------------------------------------------------------------


def order_to_record(order: Order) -> dict:
    return {
        "orderId": order.id,
        "customerId": order.customer_id,
        "items": [
            {
                "productId": item.product_id,
                "quantity": item.quantity.value,
                "unitPrice": _number(item.unit_price),
            }
            for item in order.items
        ],
        "status": order.status,
        "totalAmount": _number(order.total_amount),
        "createdAt": _timestamp(order.created_at),
    }


def order_from_record(raw: Any, require_id: bool = True) -> Order:
    fields = _Fields(raw, "order")
    return Order(
        id=fields.required_text("orderId") if require_id else fields.text("orderId"),
        customer_id=fields.text("customerId"),
        items=[_order_item(item) for item in fields.objects("items")],
        status=fields.text("status"),
        total_amount=fields.money("totalAmount"),
        created_at=fields.timestamp("createdAt"),
    )


def _order_item(raw: Any) -> OrderItem:
    fields = _Fields(raw, "order.item")
    quantity = fields.integer("quantity")
    if quantity <= 0:
        raise FormatError(f"order.item.quantity must be positive, got {quantity}")
    return OrderItem(
        product_id=fields.required_text("productId"),
        quantity=Quantity(quantity),
        unit_price=fields.money("unitPrice"),
    )


# --- Customers --------------------------------------------------------------


def customer_to_record(customer: Customer) -> dict:
    address = customer.address
    return {
        "customerId": customer.id,
        "name": customer.name,
        "email": customer.email,
        "address": {
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "zip": address.zip,
        },
    }


def customer_from_record(raw: Any, require_id: bool = True) -> Customer:
    fields = _Fields(raw, "customer")
    address = fields.child("address")
    return Customer(
        id=fields.required_text("customerId") if require_id else fields.text("customerId"),
        name=fields.text("name"),
        email=fields.text("email"),
        address=Address(
            street=address.text("street"),
            city=address.text("city"),
            state=address.text("state"),
            zip=address.text("zip"),
        ),
    )


# --- Document ---------------------------------------------------------------


def document_to_record(document: StoreDocument) -> dict:
    return {
        "products": [product_to_record(p) for p in document.products],
        "orders": [order_to_record(o) for o in document.orders],
        "customers": [customer_to_record(c) for c in document.customers],
    }


def document_from_record(raw: Any) -> StoreDocument:
    fields = _Fields(raw, "document")
    return StoreDocument(
        products=[product_from_record(p) for p in fields.objects("products")],
        orders=[order_from_record(o) for o in fields.objects("orders")],
        customers=[customer_from_record(c) for c in fields.objects("customers")],
    )


def dumps(document: StoreDocument) -> str:
    return json.dumps(document_to_record(document), indent=2) + "\n"


def loads(content: str | bytes) -> StoreDocument:
    """Parse a stored document.

    Bytes are decoded as UTF-8, with or without a byte order mark. A
    document that is JSON ``null`` is an empty store.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FormatError(f"Store document is not valid UTF-8: {exc}") from exc
    try:
        raw = parse_json(content)
    except ValueError as exc:
        raise FormatError(f"Store document is not valid JSON: {exc}") from exc
    if raw is None:
        return StoreDocument()
    return document_from_record(raw)


def parse_json(text: str) -> Any:
    """``json.loads`` with exact decimals for non-integer numbers."""
    return json.loads(text, parse_float=Decimal)


# --- Helpers ----------------------------------------------------------------


def _number(money: Money) -> int | float | str:
    """Exact JSON form of an amount.

    Whole amounts are ints. Others are floats when the float reads back
    as the same Decimal, and decimal strings beyond float precision.
    """
    amount = money.amount
    if amount == amount.to_integral_value():
        return int(amount)
    approximation = float(amount)
    if Decimal(repr(approximation)) == amount:
        return approximation
    return str(amount)


def _timestamp(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    return as_utc(moment).isoformat().replace("+00:00", "Z")


class JsonRecordCodec(RecordCodec):
    """RecordCodec over this module's wire format."""

    def product_from_record(self, raw: Any) -> Product:
        return product_from_record(raw)

    def order_from_record(self, raw: Any, require_id: bool = True) -> Order:
        return order_from_record(raw, require_id)

    def customer_from_record(self, raw: Any, require_id: bool = True) -> Customer:
        return customer_from_record(raw, require_id)

    def product_to_record(self, product: Product) -> dict:
        return product_to_record(product)

    def order_to_record(self, order: Order) -> dict:
        return order_to_record(order)

    def customer_to_record(self, customer: Customer) -> dict:
        return customer_to_record(customer)
