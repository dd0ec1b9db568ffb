"""Identifier generation for store-assigned entity IDs.

Tokens are the full 128-bit value of a random UUID rendered as hex, so
collisions are negligible at any realistic entity count. The repository
still passes the identifiers already taken, and a collision simply
draws again.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Collection

from storefront.domain.exceptions import ConflictError

logger = logging.getLogger(__name__)

ORDER_PREFIX = "ORD"
CUSTOMER_PREFIX = "CUST"


def random_token() -> str:
    return uuid.uuid4().hex


class IdentifierGenerator:

    def __init__(
        self,
        token_factory: Callable[[], str] = random_token,
        max_attempts: int = 8,
    ) -> None:
        self._token_factory = token_factory
        self._max_attempts = max_attempts

    def next(self, prefix: str) -> str:
        return f"{prefix}-{self._token_factory()}"

    def next_unique(self, prefix: str, taken: Collection[str]) -> str:
        """Draw identifiers until one is not in ``taken``.

        ``taken`` must hold case-folded identifiers.
        """
        for attempt in range(1, self._max_attempts + 1):
            candidate = self.next(prefix)
            if candidate.casefold() not in taken:
                return candidate
            logger.warning(
                "Generated identifier %s collided (attempt %d/%d)",
                candidate, attempt, self._max_attempts,
            )
        raise ConflictError(
            f"Could not generate a unique {prefix} identifier "
            f"after {self._max_attempts} attempts"
        )
