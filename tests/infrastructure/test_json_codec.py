"""Unit tests for the store document JSON codec."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.domain.exceptions import FormatError
from storefront.domain.model.customer import Address, Customer
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.model.value_objects import Money, Quantity
from storefront.infrastructure.persistence import json_codec


def _document() -> StoreDocument:
    return StoreDocument(
        products=[
            Product("P1", "Widget", "Parts", Money.of("19.99"), Money.of("7.10"), stock=3),
        ],
        orders=[
            Order(
                id="ORD-abc",
                customer_id="CUST-1",
                items=[OrderItem("P1", Quantity(2), Money.of("19.99"))],
                status="Pending",
                total_amount=Money.of("39.98"),
                created_at=datetime(2025, 5, 4, 3, 2, 1, 123456, tzinfo=timezone.utc),
            ),
        ],
        customers=[
            Customer(
                id="CUST-1", name="Ada", email="ada@example.com",
                address=Address("1 Main St", "Springfield", "IL", "62701"),
            ),
        ],
    )


class TestEncoding:

    def test_field_names_are_lower_camel_case(self):
        record = json_codec.document_to_record(_document())
        assert set(record) == {"products", "orders", "customers"}
        assert set(record["products"][0]) == {
            "id", "name", "category", "retailPrice", "wholesalePrice", "stock",
        }
        assert set(record["orders"][0]) == {
            "orderId", "customerId", "items", "status", "totalAmount", "createdAt",
        }
        assert set(record["orders"][0]["items"][0]) == {"productId", "quantity", "unitPrice"}
        assert set(record["customers"][0]) == {"customerId", "name", "email", "address"}

    def test_amounts_are_numbers(self):
        record = json_codec.document_to_record(_document())
        assert record["products"][0]["retailPrice"] == 19.99
        assert record["orders"][0]["totalAmount"] == 39.98

    def test_timestamps_are_utc_iso8601(self):
        record = json_codec.document_to_record(_document())
        assert record["orders"][0]["createdAt"] == "2025-05-04T03:02:01.123456Z"

    def test_output_is_pretty_printed(self):
        text = json_codec.dumps(_document())
        assert text.startswith("{\n  \"products\"")
        assert text.endswith("\n")


class TestDecoding:

    def test_round_trip(self):
        document = _document()
        assert json_codec.loads(json_codec.dumps(document)) == document

    def test_amounts_are_read_as_exact_decimals(self):
        document = json_codec.loads('{"products": [{"id": "P1", "retailPrice": 0.1}]}')
        assert document.products[0].retail_price.amount == Decimal("0.1")

    def test_field_names_are_case_insensitive(self):
        raw = {
            "Products": [{"ID": "P1", "Name": "Widget", "RETAILPRICE": 5, "Stock": 1}],
            "ORDERS": [{
                "OrderId": "ORD-1", "CustomerID": "CUST-1", "Status": "Shipped",
                "Items": [{"ProductId": "P1", "Quantity": 1, "UnitPrice": 5}],
                "CreatedAt": "2025-01-01T00:00:00Z",
            }],
            "customers": [{"CustomerId": "CUST-1", "EMAIL": "a@b.c", "Address": {"City": "X"}}],
        }
        document = json_codec.document_from_record(raw)
        assert document.products[0].name == "Widget"
        assert document.products[0].retail_price == Money.of(5)
        assert document.orders[0].status == "Shipped"
        assert document.orders[0].items[0].quantity == Quantity(1)
        assert document.customers[0].address.city == "X"

    def test_missing_or_null_collections_are_empty(self):
        document = json_codec.loads('{"products": null}')
        assert document == StoreDocument()

    def test_missing_optional_fields_default(self):
        document = json_codec.loads('{"products": [{"id": "P1"}]}')
        product = document.products[0]
        assert product.name == ""
        assert product.stock == 0
        assert product.retail_price == Money.zero()

    def test_naive_timestamp_is_read_as_utc(self):
        document = json_codec.loads(json.dumps({"orders": [{
            "orderId": "ORD-1", "customerId": "C",
            "items": [{"productId": "P1", "quantity": 1}],
            "createdAt": "2025-01-01T08:30:00",
        }]}))
        assert document.orders[0].created_at == datetime(2025, 1, 1, 8, 30, tzinfo=timezone.utc)

    def test_string_amounts_are_accepted(self):
        document = json_codec.loads('{"products": [{"id": "P1", "retailPrice": "12.50"}]}')
        assert document.products[0].retail_price == Money.of("12.50")

    def test_null_document_is_an_empty_store(self):
        assert json_codec.loads("null") == StoreDocument()

    def test_byte_order_mark_is_skipped(self):
        content = "\ufeff{\"products\": [{\"id\": \"P1\"}]}".encode("utf-8")
        assert json_codec.loads(content).products[0].id == "P1"

    def test_invalid_utf8_raises_format_error(self):
        with pytest.raises(FormatError, match="UTF-8"):
            json_codec.loads(b'{"products": [{"id": "\xff\xfe"}]}')


class TestFormatErrors:

    @pytest.mark.parametrize("text", ["", "   ", "{not json", "[]", "42"])
    def test_unparseable_documents(self, text):
        with pytest.raises(FormatError):
            json_codec.loads(text)

    @pytest.mark.parametrize("raw", [
        {"products": {}},
        {"products": [42]},
        {"products": [{"name": "no id"}]},
        {"products": [{"id": "P1", "stock": -1}]},
        {"products": [{"id": "P1", "stock": "many"}]},
        {"products": [{"id": "P1", "stock": 1.5}]},
        {"products": [{"id": "P1", "retailPrice": -3}]},
        {"products": [{"id": "P1", "retailPrice": True}]},
        {"orders": [{"customerId": "C", "items": []}]},
        {"orders": [{"orderId": "O", "items": [{"productId": "P1", "quantity": 0}]}]},
        {"orders": [{"orderId": "O", "createdAt": "yesterday"}]},
        {"customers": [{"customerId": "C", "address": "somewhere"}]},
    ])
    def test_schema_violations(self, raw):
        with pytest.raises(FormatError):
            json_codec.document_from_record(raw)

    def test_candidate_without_identifier_is_allowed_when_not_required(self):
        order = json_codec.order_from_record(
            {"customerId": "CUST-1", "items": [{"productId": "P1", "quantity": 2}]},
            require_id=False,
        )
        assert order.id == ""
        assert order.created_at is None


class TestAmountPrecision:

    def test_sub_cent_digits_are_rounded_before_writing(self):
        product = Product(
            "P1", "Widget", "", Money(Decimal("1234567890.123456789")), Money.zero(), 1
        )
        document = StoreDocument(products=[product])
        loaded = json_codec.loads(json_codec.dumps(document))
        assert loaded == document
        assert loaded.products[0].retail_price.amount == Decimal("1234567890.12")

    def test_amounts_beyond_float_precision_are_written_exactly(self):
        amount = Money.of("98765432109876543.21")
        document = StoreDocument(
            products=[Product("P1", "Widget", "", amount, Money.zero(), 1)]
        )
        record = json_codec.document_to_record(document)
        assert record["products"][0]["retailPrice"] == "98765432109876543.21"
        assert json_codec.loads(json_codec.dumps(document)) == document
