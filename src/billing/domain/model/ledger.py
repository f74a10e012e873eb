"""Ledger aggregate: finalized bills and the running daily rollup.

The ledger is append-only: bills are never edited or removed, except by
a full reset which wipes the ledger and the rollup together.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from billing.domain.exceptions import IndexOutOfRange
from billing.domain.model.transaction import Transaction
from billing.domain.model.value_objects import Money


@dataclass
class DailyRollup:
    """Cumulative revenue and per-item quantities for the current period."""

    total_revenue: Money = field(default_factory=Money.zero)
    item_quantities: dict[str, int] = field(default_factory=dict)

    @staticmethod
    def zeroed(item_ids: Iterable[str]) -> DailyRollup:
        return DailyRollup(Money.zero(), {item_id: 0 for item_id in item_ids})

    def folded(self, transaction: Transaction) -> DailyRollup:
        """Return a new rollup with *transaction* added in."""
        quantities = dict(self.item_quantities)
        for line in transaction.lines:
            quantities.setdefault(line.item_id, 0)
            quantities[line.item_id] += line.quantity
        return DailyRollup(
            total_revenue=(self.total_revenue + transaction.grand_total).round2(),
            item_quantities=quantities,
        )

    def copy(self) -> DailyRollup:
        return DailyRollup(self.total_revenue, dict(self.item_quantities))


class Ledger:
    """Ordered list of transactions plus their rollup.

    ``append()`` computes the folded rollup before touching any state, so
    the list and the rollup always move together.
    """

    def __init__(self, item_ids: Iterable[str]) -> None:
        self._item_ids = list(item_ids)
        self._transactions: list[Transaction] = []
        self._rollup = DailyRollup.zeroed(self._item_ids)

    def append(self, transaction: Transaction) -> None:
        rollup = self._rollup.folded(transaction)
        self._transactions.append(transaction)
        self._rollup = rollup

    def get(self, index: int) -> Transaction:
        if not 0 <= index < len(self._transactions):
            raise IndexOutOfRange(
                f"No transaction at position {index} "
                f"(ledger has {len(self._transactions)})"
            )
        return self._transactions[index]

    def reset(self) -> None:
        self._transactions = []
        self._rollup = DailyRollup.zeroed(self._item_ids)

    def restore(self, transactions: Iterable[Transaction], rollup: DailyRollup) -> None:
        """Load persisted state as-is, without folding the bills again.

        Menu items missing from the stored counters start at 0.
        """
        quantities = {item_id: 0 for item_id in self._item_ids}
        quantities.update(rollup.item_quantities)
        self._transactions = list(transactions)
        self._rollup = DailyRollup(rollup.total_revenue, quantities)

    # --- Read access ----------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def rollup(self) -> DailyRollup:
        return self._rollup.copy()

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._transactions))
