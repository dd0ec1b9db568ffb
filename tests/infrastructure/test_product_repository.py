"""Tests for the document-backed product repository."""

import threading

import pytest

from storefront.domain.exceptions import (
    ConflictError,
    NotFoundError,
    OperationCancelled,
    ValidationError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from tests.fakes import FakeDocumentStore


def _product(product_id: str, stock: int, category: str = "Parts") -> Product:
    return Product(product_id, f"Item {product_id}", category, Money.of("10"), Money.of("6"), stock)


def _setup(*products: Product) -> tuple[JsonProductRepository, FakeDocumentStore]:
    store = FakeDocumentStore(StoreDocument(products=list(products)))
    return JsonProductRepository(store), store


# ── Reads ────────────────────────────────────────────────────────────


class TestProductQueries:

    def test_empty_store(self):
        repo, _ = _setup()
        assert repo.list_all() == []
        assert repo.get_in_stock() == []
        assert repo.get_low_stock() == []
        assert repo.get_by_id("P1") is None

    def test_get_by_id_is_case_insensitive(self):
        repo, _ = _setup(_product("P1", 3))
        assert repo.get_by_id("p1").id == "P1"

    def test_get_by_category(self):
        repo, _ = _setup(_product("P1", 1, "Tools"), _product("P2", 1, "Toys"))
        assert [p.id for p in repo.get_by_category("tools")] == ["P1"]

    def test_get_in_stock(self):
        repo, _ = _setup(_product("P1", 0), _product("P2", 4))
        assert [p.id for p in repo.get_in_stock()] == ["P2"]

    def test_low_stock_excludes_exhausted_products(self):
        repo, _ = _setup(_product("P1", 3), _product("P2", 0), _product("P3", 6))
        assert [p.id for p in repo.get_low_stock()] == ["P1"]
        assert [p.id for p in repo.get_low_stock(threshold=6)] == ["P1", "P3"]

    def test_low_stock_after_stock_runs_out(self):
        repo, _ = _setup(_product("P1", 3))
        assert [p.id for p in repo.get_low_stock(5)] == ["P1"]
        repo.update_stock("P1", 0)
        assert repo.get_low_stock(5) == []

    def test_reads_do_not_save(self):
        repo, store = _setup(_product("P1", 3))
        repo.list_all()
        repo.get_by_id("P1")
        assert store.saves == 0

    def test_returned_entities_are_detached(self):
        repo, store = _setup(_product("P1", 3))
        repo.get_by_id("P1").stock = 99
        assert store.document.products[0].stock == 3


# ── Writes ───────────────────────────────────────────────────────────


class TestAddProduct:

    def test_add_persists(self):
        repo, store = _setup()
        added = repo.add(_product(" P9 ", 2))
        assert added.id == "P9"
        assert store.document.products == [added]

    def test_add_is_one_load_and_one_save(self):
        repo, store = _setup()
        repo.add(_product("P1", 2))
        assert (store.loads, store.saves) == (1, 1)

    def test_duplicate_id_conflicts(self):
        repo, store = _setup(_product("P1", 2))
        with pytest.raises(ConflictError):
            repo.add(_product("p1", 5))
        assert store.saves == 0

    def test_negative_stock_rejected(self):
        repo, store = _setup()
        with pytest.raises(ValidationError):
            repo.add(Product("P1", "Widget", "", Money.zero(), Money.zero(), -1))
        assert store.document.products == []

    def test_blank_name_rejected(self):
        repo, _ = _setup()
        with pytest.raises(ValidationError, match="name"):
            repo.add(Product("P1", " ", "", Money.zero(), Money.zero(), 1))

    def test_cancelled_add_does_nothing(self):
        repo, store = _setup()
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(OperationCancelled):
            repo.add(_product("P1", 2), cancel)
        assert (store.loads, store.saves) == (0, 0)


class TestUpdateStock:

    def test_update_stock(self):
        repo, store = _setup(_product("P1", 3))
        updated = repo.update_stock("p1", 12)
        assert updated.stock == 12
        assert store.document.products[0].stock == 12
        assert (store.loads, store.saves) == (1, 1)

    def test_negative_stock_leaves_stock_unchanged(self):
        repo, store = _setup(_product("P1", 3))
        with pytest.raises(ValidationError):
            repo.update_stock("P1", -4)
        assert store.document.products[0].stock == 3
        assert store.saves == 0

    def test_unknown_product(self):
        repo, _ = _setup()
        with pytest.raises(NotFoundError):
            repo.update_stock("P404", 1)

    def test_update_replaces_only_the_stock(self):
        repo, store = _setup(_product("P1", 3))
        repo.update(Product("P1", "Renamed", "Other", Money.of("99"), Money.of("1"), 8))
        stored = store.document.products[0]
        assert stored.stock == 8
        assert stored.name == "Item P1"
        assert stored.retail_price == Money.of("10")
