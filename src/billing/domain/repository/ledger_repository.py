"""Abstract repository for the ledger, its rollup and the bill counter.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, in-memory)
live elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from billing.domain.model.ledger import DailyRollup
from billing.domain.model.transaction import Transaction


@dataclass
class LedgerState:
    """Everything that survives between sessions."""

    transactions: list[Transaction] = field(default_factory=list)
    rollup: DailyRollup = field(default_factory=DailyRollup)
    next_sequence_number: int = 1


class LedgerRepository(ABC):

    @abstractmethod
    def load(self) -> LedgerState:
        """Return the stored state, falling back to defaults for anything
        missing or unreadable."""

    @abstractmethod
    def save(self, state: LedgerState) -> None:
        """Persist the full state.  Raises PersistenceError on failure."""
