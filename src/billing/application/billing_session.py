"""Application service: the billing session at the counter.

A BillingSession owns the bill being built, the ledger of finalized
bills and the repository they are saved to.  The CLI (or any other
front end) holds one explicitly and drives it through these methods.

Persistence happens after every finalize and every reset.  If the store
fails, the session logs it and carries on in memory for the rest of its
life rather than crash or lose the ledger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from billing.application.dto import (
    ItemSalesDTO,
    LineItemDTO,
    OrderDTO,
    SalesSummaryDTO,
    TransactionDTO,
)
from billing.application.export import (
    ExportTable,
    format_timestamp,
    order_table,
    sales_report,
    transaction_table,
)
from billing.domain.exceptions import EmptyLedger, EmptyOrder, PersistenceError
from billing.domain.model.ledger import Ledger
from billing.domain.model.menu import MenuCatalog
from billing.domain.model.order import TAX_RATE, Order
from billing.domain.model.transaction import Transaction
from billing.domain.repository.ledger_repository import LedgerRepository, LedgerState

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

CLEAR_PROMPT = "Are you sure you want to clear the current bill?"
RESET_PROMPT = (
    "Are you sure you want to reset all data? "
    "This will clear all transactions and the current bill."
)


class BillingSession:

    def __init__(
        self,
        catalog: MenuCatalog,
        repository: LedgerRepository,
        tax_rate: Decimal = TAX_RATE,
    ) -> None:
        self._catalog = catalog
        self._repository = repository
        self._ledger = Ledger(catalog.ids())
        self._order = Order(catalog=catalog, tax_rate=tax_rate)
        self._persistence_enabled = True

    @classmethod
    def open(
        cls,
        catalog: MenuCatalog,
        repository: LedgerRepository,
        tax_rate: Decimal = TAX_RATE,
    ) -> BillingSession:
        """Start a session from whatever the repository has stored."""
        session = cls(catalog, repository, tax_rate)
        state = repository.load()
        session._ledger.restore(state.transactions, state.rollup)
        session._order.sequence_number = state.next_sequence_number
        logger.info(
            "Session opened with %d stored bills, next bill #%d",
            len(state.transactions),
            state.next_sequence_number,
        )
        return session

    # --- Order commands -------------------------------------------------------

    def add_item(self, item_id: str, quantity: int) -> OrderDTO:
        self._order.add_line(item_id, quantity)
        return self.current_order()

    def remove_item(self, index: int) -> OrderDTO:
        self._order.remove_line(index)
        return self.current_order()

    def clear_order(self, confirm: Confirm | None = None) -> bool:
        """Empty the current bill.

        When the bill has lines and *confirm* is given, it is asked first;
        a false answer leaves the bill untouched and returns False.
        """
        if not self._order.is_empty and confirm is not None and not confirm(CLEAR_PROMPT):
            return False
        self._order.clear()
        return True

    def finalize(self, note: str = "") -> TransactionDTO:
        """Close the current bill, add it to the ledger and save.

        The bill stays open until the ledger has accepted it.
        """
        transaction = self._order.snapshot(note)
        self._ledger.append(transaction)
        self._order.start_next()
        logger.info(
            "Bill #%d finalized: %s (%d items)",
            transaction.sequence_number,
            transaction.grand_total,
            transaction.item_count,
        )
        self._persist()
        return _transaction_dto(len(self._ledger) - 1, transaction)

    def reset(self, confirm: Confirm | None = None) -> bool:
        """Wipe the ledger, the rollup and the current bill.

        Returns False without changing anything if there is nothing to
        reset or *confirm* declines.
        """
        if not len(self._ledger) and self._order.is_empty:
            logger.info("Reset requested with no data to reset")
            return False
        if confirm is not None and not confirm(RESET_PROMPT):
            return False

        self._ledger.reset()
        self._order.clear()
        self._order.sequence_number = 1
        logger.info("All billing data reset")
        self._persist()
        return True

    # --- Queries --------------------------------------------------------------

    @property
    def persistence_enabled(self) -> bool:
        return self._persistence_enabled

    @property
    def catalog(self) -> MenuCatalog:
        return self._catalog

    def current_order(self) -> OrderDTO:
        order = self._order
        totals = order.totals
        return OrderDTO(
            sequence_number=order.sequence_number,
            items=[
                LineItemDTO(
                    item_id=line.item_id,
                    name=line.name,
                    quantity=line.quantity.value,
                    unit_price=str(line.unit_price),
                    line_total=str(line.line_total),
                )
                for line in order.lines
            ],
            item_count=totals.item_count,
            subtotal=str(totals.subtotal),
            tax=str(totals.tax),
            grand_total=str(totals.grand_total),
            created_at=format_timestamp(order.created_at),
        )

    def transactions(self) -> list[TransactionDTO]:
        return [_transaction_dto(i, txn) for i, txn in enumerate(self._ledger)]

    def transaction(self, index: int) -> TransactionDTO:
        return _transaction_dto(index, self._ledger.get(index))

    def sales_summary(self) -> SalesSummaryDTO:
        rollup = self._ledger.rollup
        items = []
        for item_id, quantity in rollup.item_quantities.items():
            menu_item = self._catalog.get(item_id)
            items.append(
                ItemSalesDTO(
                    item_id=item_id,
                    name=menu_item.name if menu_item else item_id,
                    quantity=quantity,
                )
            )
        return SalesSummaryDTO(
            total_revenue=str(rollup.total_revenue),
            total_bills=len(self._ledger),
            items=items,
        )

    # --- Export ---------------------------------------------------------------

    def export_transaction(self, index: int) -> list[ExportTable]:
        return [transaction_table(self._ledger.get(index))]

    def export_current_order(self, note: str = "") -> list[ExportTable]:
        if self._order.is_empty:
            raise EmptyOrder("Cannot export an empty bill")
        return [order_table(self._order, note)]

    def export_sales(self) -> list[ExportTable]:
        if not len(self._ledger):
            raise EmptyLedger("No transactions to report")
        return sales_report(self._ledger.rollup, self._catalog, self._ledger.transactions)

    # --- Internal helpers -----------------------------------------------------

    def _persist(self) -> None:
        if not self._persistence_enabled:
            return
        state = LedgerState(
            transactions=list(self._ledger.transactions),
            rollup=self._ledger.rollup,
            next_sequence_number=self._order.sequence_number,
        )
        try:
            self._repository.save(state)
        except PersistenceError as exc:
            self._persistence_enabled = False
            logger.warning(
                "Could not save billing data, continuing in memory only: %s", exc
            )


def _transaction_dto(index: int, txn: Transaction) -> TransactionDTO:
    return TransactionDTO(
        index=index,
        sequence_number=txn.sequence_number,
        items=[
            LineItemDTO(
                item_id=line.item_id,
                name=line.name,
                quantity=line.quantity,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in txn.lines
        ],
        item_count=txn.item_count,
        subtotal=str(txn.subtotal),
        tax=str(txn.tax),
        grand_total=str(txn.grand_total),
        note=txn.note,
        finalized_at=format_timestamp(txn.finalized_at),
    )
