"""Domain-level exceptions.

Every business rule violation is a subclass of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.  The
stock errors carry structured detail (which line, which product, how much
was missing) so callers can render a precise, itemized failure.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested product, batch, sale or order does not exist."""


class PermissionDeniedError(DomainException):
    """The acting identity is not allowed to perform the operation."""


class InvalidStateTransitionError(DomainException):
    """An order status transition was attempted from the wrong state."""


class InvalidReleaseError(DomainException):
    """A release would push a batch above its initial quantity."""


class ConcurrentStockConflictError(DomainException):
    """A batch was drained by another transaction between planning and reserving."""


@dataclass(frozen=True)
class Shortfall:
    product_code: str
    requested: int
    available: int
    line_number: int | None = None

    @property
    def missing(self) -> int:
        return self.requested - self.available

    def describe(self) -> str:
        prefix = f"line {self.line_number}: " if self.line_number is not None else ""
        return (
            f"{prefix}insufficient stock for product {self.product_code} "
            f"(requested {self.requested}, available {self.available})"
        )


class InsufficientStockError(DomainException):
    """Requested quantity exceeds what the batches can supply.

    ``requested``/``available``/``product_code`` describe the first
    shortfall; ``shortfalls`` lists every failing line of a transaction.
    """

    def __init__(self, shortfalls: list[Shortfall]) -> None:
        if not shortfalls:
            raise ValueError("InsufficientStockError needs at least one shortfall")
        self.shortfalls = list(shortfalls)
        super().__init__("; ".join(s.describe() for s in self.shortfalls))

    @classmethod
    def single(
        cls,
        product_code: str,
        requested: int,
        available: int,
        line_number: int | None = None,
    ) -> InsufficientStockError:
        return cls([Shortfall(product_code, requested, available, line_number)])

    @property
    def product_code(self) -> str:
        return self.shortfalls[0].product_code

    @property
    def requested(self) -> int:
        return self.shortfalls[0].requested

    @property
    def available(self) -> int:
        return self.shortfalls[0].available
