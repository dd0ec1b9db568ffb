"""Document-backed implementation of CustomerRepository."""

from __future__ import annotations

import threading

from storefront.domain.exceptions import ConflictError
from storefront.domain.model.customer import Customer
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.customer_repository import CustomerRepository
from storefront.domain.repository.document_store import DocumentStore
from storefront.infrastructure.persistence.document_repository import (
    DocumentRepository,
)
from storefront.infrastructure.persistence.identifiers import (
    CUSTOMER_PREFIX,
    IdentifierGenerator,
)


class JsonCustomerRepository(DocumentRepository[Customer], CustomerRepository):

    entity_name = "customer"

    def __init__(
        self, store: DocumentStore, ids: IdentifierGenerator | None = None
    ) -> None:
        super().__init__(store)
        self._ids = ids or IdentifierGenerator()

    # --- CustomerRepository interface -----------------------------------------

    def get_by_email(
        self, email: str, cancel: threading.Event | None = None
    ) -> Customer | None:
        if not email or not email.strip():
            return None
        matches = self.find(lambda c: c.has_email(email), cancel)
        return matches[0] if matches else None

    # --- Engine hooks ---------------------------------------------------------

    def _collection(self, document: StoreDocument) -> list[Customer]:
        return document.customers

    def _key(self, customer: Customer) -> str:
        return customer.id

    def _prepare_new(self, candidate: Customer, document: StoreDocument) -> Customer:
        customer = Customer.create(candidate.name, candidate.email, candidate.address)
        self._ensure_email_free(customer.email, document, owner=None)
        customer.id = self._ids.next_unique(CUSTOMER_PREFIX, self._taken_keys(document))
        return customer

    def _apply_update(
        self, existing: Customer, candidate: Customer, document: StoreDocument
    ) -> Customer:
        # Name and email are replaceable; the address is not.
        self._ensure_email_free(candidate.email or "", document, owner=existing)
        existing.update_contact(candidate.name, candidate.email)
        return existing

    @staticmethod
    def _ensure_email_free(
        email: str, document: StoreDocument, owner: Customer | None
    ) -> None:
        for other in document.customers:
            if other is owner:
                continue
            if email.strip() and other.has_email(email):
                raise ConflictError(
                    f"Email '{email.strip()}' is already used by customer {other.id}"
                )
