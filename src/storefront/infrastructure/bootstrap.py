"""Composition root: wires concrete implementations to domain interfaces.

This is the only place that knows about *all* layers. The hosting
process creates one document store and hands the same instance to every
repository, so all of them serialize through one exclusive section.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.operations import CatalogOperations
from storefront.infrastructure.config import StoreSettings
from storefront.infrastructure.persistence.json_codec import JsonRecordCodec
from storefront.infrastructure.persistence.document_store import JsonDocumentStore
from storefront.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@dataclass(frozen=True)
class Repositories:
    products: JsonProductRepository
    orders: JsonOrderRepository
    customers: JsonCustomerRepository


def document_store(settings: StoreSettings | None = None) -> JsonDocumentStore:
    return JsonDocumentStore(settings or StoreSettings.from_env())


def repositories(store: JsonDocumentStore) -> Repositories:
    return Repositories(
        products=JsonProductRepository(store),
        orders=JsonOrderRepository(store),
        customers=JsonCustomerRepository(store),
    )


def catalog_operations(repos: Repositories) -> CatalogOperations:
    return CatalogOperations(
        products=repos.products,
        orders=repos.orders,
        customers=repos.customers,
        codec=JsonRecordCodec(),
    )
