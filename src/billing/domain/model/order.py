"""Order aggregate: the bill being rung up at the counter.

The Order owns its line items and keeps its totals in step with them.
Totals are never set by hand: every mutation ends with a recomputation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from billing.domain.exceptions import EmptyOrder, IndexOutOfRange
from billing.domain.model.menu import MenuCatalog
from billing.domain.model.transaction import Transaction, TransactionLine
from billing.domain.model.value_objects import Money, Quantity

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
TAX_RATE = Decimal("0.05")


@dataclass
class LineItem:
    """One menu item and the quantity ordered.

    Name and unit price are copied from the catalog when the line is
    created (price lock).  Only ``quantity`` grows, on repeat adds.
    """

    item_id: str
    name: str
    unit_price: Money
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    grand_total: Money
    item_count: int  # sum of quantities, not distinct lines

    @staticmethod
    def empty() -> OrderTotals:
        return OrderTotals(Money.zero(), Money.zero(), Money.zero(), 0)


def compute_totals(
    lines: Iterable[LineItem], tax_rate: Decimal = TAX_RATE
) -> OrderTotals:
    """Derive subtotal, tax, grand total and item count from *lines*.

    Amounts are rounded when computed, not when displayed, so stored and
    printed figures always agree.
    """
    subtotal = Money.zero()
    item_count = 0
    for line in lines:
        subtotal = subtotal + line.line_total
        item_count += line.quantity.value
    subtotal = subtotal.round2()
    tax = (subtotal * tax_rate).round2()
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        grand_total=(subtotal + tax).round2(),
        item_count=item_count,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for the in-progress bill.

    Lines keep insertion order, which only matters for display.  The
    sequence number advances on ``finalize()`` and nowhere else.
    """

    catalog: MenuCatalog
    sequence_number: int = 1
    tax_rate: Decimal = TAX_RATE
    lines: list[LineItem] = field(default_factory=list)
    totals: OrderTotals = field(default_factory=OrderTotals.empty)
    created_at: datetime = field(default_factory=_utcnow)

    # --- Mutations ------------------------------------------------------------

    def add_line(self, item_id: str, quantity: int) -> None:
        """Add *quantity* of a menu item, merging with an existing line."""
        qty = Quantity(quantity)
        menu_item = self.catalog.require(item_id)

        for line in self.lines:
            if line.item_id == item_id:
                line.quantity = line.quantity + qty
                break
        else:
            self.lines.append(
                LineItem(
                    item_id=menu_item.id,
                    name=menu_item.name,
                    unit_price=menu_item.unit_price,  # <-- price snapshot
                    quantity=qty,
                )
            )
        logger.debug("Bill #%s: added %s x %s", self.sequence_number, qty, item_id)
        self.recompute_totals()

    def remove_line(self, index: int) -> None:
        """Remove the line at *index*; the rest keep their relative order."""
        if not 0 <= index < len(self.lines):
            raise IndexOutOfRange(
                f"No line at position {index} (bill has {len(self.lines)} lines)"
            )
        removed = self.lines.pop(index)
        logger.debug("Bill #%s: removed %s", self.sequence_number, removed.item_id)
        self.recompute_totals()

    def recompute_totals(self) -> OrderTotals:
        self.totals = compute_totals(self.lines, self.tax_rate)
        return self.totals

    def clear(self) -> None:
        """Drop every line.  The sequence number is left alone."""
        self.lines = []
        self.created_at = _utcnow()
        self.recompute_totals()

    def snapshot(self, note: str = "") -> Transaction:
        """Build the Transaction for this order without changing it.

        Lines are deep-copied into the snapshot.
        """
        if not self.lines:
            raise EmptyOrder("Cannot finalize an empty bill")

        totals = self.recompute_totals()
        return Transaction(
            sequence_number=self.sequence_number,
            lines=tuple(
                TransactionLine(
                    item_id=line.item_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity.value,
                )
                for line in self.lines
            ),
            subtotal=totals.subtotal,
            tax=totals.tax,
            grand_total=totals.grand_total,
            item_count=totals.item_count,
            note=(note or "").strip(),
            finalized_at=_utcnow(),
        )

    def start_next(self) -> None:
        """Advance to the next sequence number with an empty bill."""
        self.sequence_number += 1
        self.clear()

    def finalize(self, note: str = "") -> Transaction:
        """Snapshot this order as a Transaction and start the next bill.

        Afterwards this order is empty and carries the next sequence
        number.  Adding the snapshot to the ledger is the caller's job.
        """
        transaction = self.snapshot(note)
        self.start_next()
        return transaction

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines
