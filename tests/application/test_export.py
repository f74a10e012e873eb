"""Unit tests for the export table builders."""

from datetime import datetime, timezone

from billing.application.export import (
    BILL_HEADERS,
    LINE_HEADERS,
    bills_table,
    order_table,
    sales_report,
    sales_table,
    transaction_table,
)
from billing.domain.model.ledger import DailyRollup
from billing.domain.model.menu import default_menu
from billing.domain.model.order import Order
from billing.domain.model.value_objects import Money
from billing.domain.service.record_normalizer import normalize_transaction

WHEN = "2024-05-01T09:30:00+00:00"


def _txn(number: int = 1):
    return normalize_transaction(
        {
            "sequence_number": number,
            "items": [
                {"item_id": "dosa", "name": "Dosa", "unit_price": "25", "quantity": 2},
                {"item_id": "tea", "name": "Tea", "unit_price": "20", "quantity": 1},
            ],
            "note": "parcel",
            "finalized_at": WHEN,
        }
    )


class TestTransactionTable:

    def test_rows_and_summary(self):
        table = transaction_table(_txn(3))
        assert table.title == "Bill #3"
        assert table.subtitle == "Date: 2024-05-01 09:30 UTC"
        assert table.headers == LINE_HEADERS
        assert table.rows == [
            ("Dosa", 2, Money.of("25"), Money.of("50")),
            ("Tea", 1, Money.of("20"), Money.of("20")),
        ]
        assert table.summary == [
            ("Items", 3),
            ("Subtotal", Money.of("70.00")),
            ("Tax (5%)", Money.of("3.50")),
            ("Grand Total", Money.of("73.50")),
        ]
        assert table.note == "parcel"

    def test_other_timezones_shown_in_utc(self):
        txn = normalize_transaction({"finalized_at": "2024-05-01T15:00:00+05:30"})
        assert transaction_table(txn).subtitle == "Date: 2024-05-01 09:30 UTC"


class TestOrderTable:

    def test_preview_uses_live_totals(self):
        order = Order(catalog=default_menu(), sequence_number=9)
        order.add_line("coffee", 2)
        table = order_table(order, " hot ")
        assert table.title == "Bill #9"
        assert table.rows == [("Coffee", 2, Money.of("35"), Money.of("70"))]
        assert ("Grand Total", Money.of("73.50")) in table.summary
        assert table.note == "hot"


class TestSalesTables:

    def test_only_sold_menu_items_listed_in_menu_order(self):
        rollup = DailyRollup(
            Money.of("120.00"),
            {"tea": 2, "idli": 5, "dosa": 0, "upma": 3},
        )
        table = sales_table(rollup, default_menu(), bill_count=4)
        assert table.rows == [
            ("Idli", 5, Money.of("6"), Money.of("30")),
            ("Tea", 2, Money.of("20"), Money.of("40")),
        ]
        assert table.summary == [
            ("Total Revenue", Money.of("120.00")),
            ("Total Bills", 4),
        ]

    def test_bills_table(self):
        table = bills_table([_txn(1), _txn(2)])
        assert table.headers == BILL_HEADERS
        assert table.rows == [
            ("Bill #1", "2024-05-01 09:30 UTC", Money.of("73.50")),
            ("Bill #2", "2024-05-01 09:30 UTC", Money.of("73.50")),
        ]

    def test_report_has_items_then_bills(self):
        tables = sales_report(DailyRollup.zeroed(["tea"]), default_menu(), [_txn()])
        assert [t.title for t in tables] == ["Item-wise Sales", "Transaction Details"]
        assert ("Total Bills", 1) in tables[0].summary


def test_timestamps_are_aware():
    assert _txn().finalized_at == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
