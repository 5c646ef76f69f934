"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """A product does not have enough stock for the requested quantity."""

    def __init__(self, product_name: str, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {required}, have {available} available)"
        )
        self.product_name = product_name
        self.required = required
        self.available = available


class RemoteServiceError(DomainException):
    """An external service could not be reached or answered with an error."""


class SalesServiceError(RemoteServiceError):
    """The Sales Service could not be reached or failed to store the order."""


class CatalogServiceError(RemoteServiceError):
    """The Catalog Service could not be reached or answered with an error."""


class StorageError(DomainException):
    """Local key-value storage could not be read or written."""
