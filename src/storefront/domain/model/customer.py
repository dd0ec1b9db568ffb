"""Customer aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


def _clean_contact(name: str, email: str) -> tuple[str, str]:
    if not name or not name.strip():
        raise ValidationError("Customer name is required")
    if not email or "@" not in email:
        raise ValidationError(f"Invalid customer email: {email!r}")
    return name.strip(), email.strip()


@dataclass
class Customer:
    """A customer of the store.

    Identifiers are assigned by the repository on creation. The email
    address is unique across customers (compared case-insensitively) so
    that lookups by email return at most one customer.
    """

    id: str
    name: str
    email: str
    address: Address = field(default_factory=Address)

    @staticmethod
    def create(name: str, email: str, address: Address | None = None) -> Customer:
        """Build a customer without an identifier, enforcing invariants."""
        name, email = _clean_contact(name, email)
        return Customer(id="", name=name, email=email, address=address or Address())

    def update_contact(self, name: str, email: str) -> None:
        """Replace name and email; the address is left untouched."""
        self.name, self.email = _clean_contact(name, email)

    def has_email(self, email: str) -> bool:
        return self.email.casefold() == email.strip().casefold()
