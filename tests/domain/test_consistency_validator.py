"""Unit tests for the cross-entity consistency checks."""

from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import ReferentialError, ValidationError
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.consistency_validator import (
    ConsistencyValidator,
    customer_exists,
    missing_products,
    stock_deltas,
)


def _document() -> StoreDocument:
    return StoreDocument(
        products=[
            Product("P1", "Widget", "Parts", Money.of("15"), Money.of("9"), stock=10),
            Product("P2", "Gadget", "Parts", Money.of("25"), Money.of("14"), stock=2),
        ],
        customers=[Customer(id="CUST-1", name="Ada", email="ada@example.com")],
    )


def _order(*lines: tuple[str, int], customer_id: str = "CUST-1") -> Order:
    return Order(
        id="ORD-1",
        customer_id=customer_id,
        items=[OrderItem(pid, Quantity(qty), Money.zero()) for pid, qty in lines],
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


# ── Pure predicates ──────────────────────────────────────────────────────────


class TestPredicates:

    def test_missing_products_reports_each_once_in_order(self):
        index = _document().product_index()
        assert missing_products(["X", "P1", "Y", "X"], index) == ["X", "Y"]

    def test_customer_exists(self):
        index = _document().customer_index()
        assert customer_exists("cust-1", index)
        assert not customer_exists("CUST-2", index)

    def test_stock_deltas_for_new_order(self):
        assert stock_deltas(None, _order(("P1", 2), ("p1", 1))) == {"p1": 3}

    def test_stock_deltas_against_previous_order(self):
        previous = _order(("P1", 5), ("P2", 1))
        replacement = _order(("P1", 2), ("P3", 4))
        assert stock_deltas(previous, replacement) == {"p1": -3, "p2": -1, "p3": 4}

    def test_unchanged_quantities_produce_no_delta(self):
        order = _order(("P1", 2))
        assert stock_deltas(order, order) == {}


# ── ConsistencyValidator.check_order ─────────────────────────────────────────


class TestCheckOrder:

    def test_valid_order_returns_deltas(self):
        deltas = ConsistencyValidator().check_order(_order(("P1", 4)), _document())
        assert deltas == {"p1": 4}

    def test_unknown_customer_rejected(self):
        with pytest.raises(ReferentialError, match="Customer not found"):
            ConsistencyValidator().check_order(
                _order(("P1", 1), customer_id="CUST-404"), _document()
            )

    def test_unknown_product_rejected(self):
        with pytest.raises(ReferentialError, match="unknown products: P9"):
            ConsistencyValidator().check_order(_order(("P1", 1), ("P9", 1)), _document())

    def test_insufficient_stock_rejected(self):
        with pytest.raises(ValidationError, match="Insufficient stock for P2"):
            ConsistencyValidator().check_order(_order(("P2", 3)), _document())

    def test_replacement_only_needs_the_extra_units(self):
        previous = _order(("P2", 2))
        replacement = _order(("P2", 4))
        # Two units already taken by the previous version, two more available.
        deltas = ConsistencyValidator().check_order(replacement, _document(), previous)
        assert deltas == {"p2": 2}

    def test_check_does_not_touch_the_document(self):
        document = _document()
        ConsistencyValidator().check_order(_order(("P1", 4)), document)
        assert document.product_index()["p1"].stock == 10
