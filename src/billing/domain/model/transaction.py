"""Transaction, an immutable snapshot of a finalized order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from billing.domain.model.value_objects import Money


@dataclass(frozen=True)
class TransactionLine:
    """A line item copied out of the order at finalize time."""

    item_id: str
    name: str
    unit_price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Transaction:
    """A finalized bill as kept in the ledger.

    Created once when an order is finalized (or rebuilt by the record
    normalizer when loading) and never changed afterwards.
    ``sequence_number`` is 0 for historical records that never stored one.
    """

    sequence_number: int
    lines: tuple[TransactionLine, ...]
    subtotal: Money
    tax: Money
    grand_total: Money
    item_count: int
    note: str
    finalized_at: datetime
