"""Abstract repository for the Order aggregate."""

from __future__ import annotations

import threading
from abc import abstractmethod
from datetime import datetime

from storefront.domain.model.order import Order
from storefront.domain.repository.entity_repository import EntityRepository


class OrderRepository(EntityRepository[Order]):

    @abstractmethod
    def get_by_customer_id(
        self, customer_id: str, cancel: threading.Event | None = None
    ) -> list[Order]:
        """Return every order placed by the customer."""

    @abstractmethod
    def get_by_status(
        self, status: str, cancel: threading.Event | None = None
    ) -> list[Order]:
        """Return orders whose status matches, ignoring case."""

    @abstractmethod
    def get_by_date_range(
        self,
        start: datetime,
        end: datetime,
        cancel: threading.Event | None = None,
    ) -> list[Order]:
        """Return orders created within ``[start, end]``."""

    @abstractmethod
    def update_status(
        self, order_id: str, status: str, cancel: threading.Event | None = None
    ) -> Order:
        """Replace only the status of an order."""
