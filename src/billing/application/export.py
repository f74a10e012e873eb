"""Export bills and the sales rollup as printable tables.

These functions only shape data into rows; drawing a document from
them is a renderer's job.  Cells hold raw values (str, int, Money) so
each renderer can format money the way its medium needs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from billing.domain.model.ledger import DailyRollup
from billing.domain.model.menu import MenuCatalog
from billing.domain.model.order import TAX_RATE, Order
from billing.domain.model.transaction import Transaction

LINE_HEADERS = ("Item", "Quantity", "Price", "Total")
BILL_HEADERS = ("Bill Number", "Date & Time", "Total")


@dataclass(frozen=True)
class ExportTable:
    """A titled table with an optional key/value summary block."""

    title: str
    headers: tuple[str, ...]
    rows: list[tuple[object, ...]]
    subtitle: str = ""
    summary: list[tuple[str, object]] = field(default_factory=list)
    note: str = ""


class TableRenderer(ABC):
    """Turns export tables into a document body (text, CSV, ...)."""

    @abstractmethod
    def render(self, tables: Sequence[ExportTable]) -> str:
        """Render *tables* in order, as one document."""


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _tax_label() -> str:
    return f"Tax ({TAX_RATE * 100:.0f}%)"


def transaction_table(transaction: Transaction) -> ExportTable:
    return ExportTable(
        title=f"Bill #{transaction.sequence_number}",
        subtitle=f"Date: {format_timestamp(transaction.finalized_at)}",
        headers=LINE_HEADERS,
        rows=[
            (line.name, line.quantity, line.unit_price, line.line_total)
            for line in transaction.lines
        ],
        summary=[
            ("Items", transaction.item_count),
            ("Subtotal", transaction.subtotal),
            (_tax_label(), transaction.tax),
            ("Grand Total", transaction.grand_total),
        ],
        note=transaction.note,
    )


def order_table(order: Order, note: str = "") -> ExportTable:
    """Preview of a bill that has not been finalized yet."""
    totals = order.totals
    return ExportTable(
        title=f"Bill #{order.sequence_number}",
        subtitle=f"Date: {format_timestamp(order.created_at)}",
        headers=LINE_HEADERS,
        rows=[
            (line.name, line.quantity.value, line.unit_price, line.line_total)
            for line in order.lines
        ],
        summary=[
            ("Items", totals.item_count),
            ("Subtotal", totals.subtotal),
            (_tax_label(), totals.tax),
            ("Grand Total", totals.grand_total),
        ],
        note=note.strip(),
    )


def sales_table(
    rollup: DailyRollup, catalog: MenuCatalog, bill_count: int
) -> ExportTable:
    """Item-wise sales, priced from the current menu.

    Counters for ids no longer on the menu still count towards revenue
    but cannot be priced, so they are left out of the rows.
    """
    rows: list[tuple[object, ...]] = []
    for item in catalog:
        quantity = rollup.item_quantities.get(item.id, 0)
        if quantity > 0:
            rows.append((item.name, quantity, item.unit_price, item.unit_price * quantity))
    return ExportTable(
        title="Item-wise Sales",
        headers=LINE_HEADERS,
        rows=rows,
        summary=[
            ("Total Revenue", rollup.total_revenue),
            ("Total Bills", bill_count),
        ],
    )


def bills_table(transactions: Sequence[Transaction]) -> ExportTable:
    return ExportTable(
        title="Transaction Details",
        headers=BILL_HEADERS,
        rows=[
            (
                f"Bill #{txn.sequence_number}",
                format_timestamp(txn.finalized_at),
                txn.grand_total,
            )
            for txn in transactions
        ],
    )


def sales_report(
    rollup: DailyRollup, catalog: MenuCatalog, transactions: Sequence[Transaction]
) -> list[ExportTable]:
    """The daily revenue report: item-wise sales, then every bill."""
    return [
        sales_table(rollup, catalog, len(transactions)),
        bills_table(transactions),
    ]
