"""Abstract repository for the Customer aggregate."""

from __future__ import annotations

import threading
from abc import abstractmethod

from storefront.domain.model.customer import Customer
from storefront.domain.repository.entity_repository import EntityRepository


class CustomerRepository(EntityRepository[Customer]):

    @abstractmethod
    def get_by_email(
        self, email: str, cancel: threading.Event | None = None
    ) -> Customer | None:
        """Return the customer with this email (case-insensitive), or None."""
