"""JSON-file-backed implementation of LedgerRepository.

The file holds one object with three keys::

    {
      "transactions": [...],
      "rollup": {"total_revenue": "72.50", "item_quantities": {...}},
      "next_sequence_number": 3
    }

Each key is read independently: a missing or corrupt key falls back to
its default without affecting the others.  Stored transactions always
go through the record normalizer on the way in.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from billing.domain.exceptions import PersistenceError
from billing.domain.model.ledger import DailyRollup
from billing.domain.model.transaction import Transaction
from billing.domain.repository.ledger_repository import LedgerRepository, LedgerState
from billing.domain.service.record_normalizer import (
    normalize_rollup,
    normalize_sequence_number,
    normalize_transaction,
)

logger = logging.getLogger(__name__)


class JsonLedgerRepository(LedgerRepository):

    def __init__(self, file_path: Path, item_ids: Iterable[str]) -> None:
        self._file_path = file_path
        self._item_ids = list(item_ids)

    # --- LedgerRepository interface -------------------------------------------

    def load(self) -> LedgerState:
        raw = self._load_raw()

        transactions_raw = raw.get("transactions")
        if transactions_raw is None:
            transactions_raw = []
        elif not isinstance(transactions_raw, list):
            logger.warning("Ignoring stored transactions: expected a list")
            transactions_raw = []

        rollup_raw = raw.get("rollup")
        if rollup_raw is not None and not isinstance(rollup_raw, dict):
            logger.warning("Ignoring stored rollup: expected an object")

        return LedgerState(
            transactions=[normalize_transaction(t) for t in transactions_raw],
            rollup=normalize_rollup(rollup_raw, self._item_ids),
            next_sequence_number=normalize_sequence_number(
                raw.get("next_sequence_number")
            ),
        )

    def save(self, state: LedgerState) -> None:
        raw = {
            "transactions": [self._transaction_to_raw(t) for t in state.transactions],
            "rollup": self._rollup_to_raw(state.rollup),
            "next_sequence_number": state.next_sequence_number,
        }
        self._persist_raw(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _transaction_to_raw(txn: Transaction) -> dict[str, Any]:
        return {
            "sequence_number": txn.sequence_number,
            "items": [
                {
                    "item_id": line.item_id,
                    "name": line.name,
                    "unit_price": line.unit_price.plain(),
                    "quantity": line.quantity,
                }
                for line in txn.lines
            ],
            "subtotal": str(txn.subtotal.amount),
            "tax": str(txn.tax.amount),
            "total": str(txn.grand_total.amount),
            "item_count": txn.item_count,
            "note": txn.note,
            "finalized_at": txn.finalized_at.isoformat(),
        }

    @staticmethod
    def _rollup_to_raw(rollup: DailyRollup) -> dict[str, Any]:
        return {
            "total_revenue": str(rollup.total_revenue.amount),
            "item_quantities": dict(rollup.item_quantities),
        }

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("Could not read %s, starting empty: %s", self._file_path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring %s: expected a JSON object", self._file_path)
            return {}
        return raw

    def _persist_raw(self, raw: dict[str, Any]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            raise PersistenceError(f"Could not write {self._file_path}: {exc}") from exc
