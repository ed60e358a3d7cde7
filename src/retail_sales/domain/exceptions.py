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


# --- Discount engine ----------------------------------------------------------


class InvalidQuantity(ValidationError):
    """Quantity is zero or negative."""


class QuantityLimitExceeded(ValidationError):
    """More identical items than a single line may hold."""


class InvalidPrice(ValidationError):
    """Unit price is zero or negative."""


class PriceLimitExceeded(ValidationError):
    """Unit price is above the allowed ceiling."""


# --- Sale aggregate -----------------------------------------------------------


class SaleCancelled(ValidationError):
    """The sale is cancelled and no longer accepts changes."""


class AlreadyConfirmed(ValidationError):
    pass


class AlreadyCancelled(ValidationError):
    pass


class DuplicateProductInSale(ValidationError):
    """The sale already has an active line for this product."""


class ItemNotFound(EntityNotFoundError):
    """No active item with the given ID exists in the sale."""


# --- Stock --------------------------------------------------------------------


class InsufficientStock(ValidationError):
    """Not enough product stock to cover the requested quantity."""
