"""Domain-level exceptions.

All failures surfaced by the store are subclasses of DomainException
so front ends (the CLI, the request layer) can catch them uniformly
and render user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all storefront errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class NotFoundError(DomainException):
    """The target of an update does not exist."""


class ConflictError(DomainException):
    """An entity with the same identifying value already exists."""


class ReferentialError(DomainException):
    """An order references a customer or product that does not exist."""


class OperationCancelled(DomainException):
    """The caller cancelled before the exclusive section was acquired."""


class UnsupportedOperationError(DomainException):
    """No operation is registered under the requested name."""


class ConfigurationError(DomainException):
    """Store settings are malformed."""


class StoreError(DomainException):
    """Base class for failures of the backing document itself."""


class FormatError(StoreError):
    """The backing content exists but does not match the document schema."""


class StoreIOError(StoreError):
    """Reading or writing the backing document failed."""


class LockTimeoutError(StoreIOError):
    """The exclusive section could not be acquired in time."""
