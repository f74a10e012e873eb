"""Domain-level exceptions.

All billing rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
None of them are fatal: the operator fixes the input and carries on.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidQuantity(ValidationError):
    """Quantity is not a positive integer."""


class EmptyOrder(ValidationError):
    """The operation needs an order with at least one line."""


class EmptyLedger(ValidationError):
    """The operation needs at least one finalized transaction."""


class UnknownItem(EntityNotFoundError):
    """The item identifier is not on the menu."""


class IndexOutOfRange(EntityNotFoundError):
    """No line or transaction exists at the requested position."""


class PersistenceError(DomainException):
    """The backing store could not be read or written."""
