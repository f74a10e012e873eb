"""Integration tests for the BillingSession use cases.

Uses in-memory fake repositories, no file I/O.
"""

import logging

import pytest

from billing.application.billing_session import CLEAR_PROMPT, RESET_PROMPT, BillingSession
from billing.domain.exceptions import (
    EmptyLedger,
    EmptyOrder,
    IndexOutOfRange,
    InvalidQuantity,
    UnknownItem,
)
from billing.domain.model.ledger import DailyRollup
from billing.domain.model.menu import default_menu
from billing.domain.model.value_objects import Money
from billing.domain.repository.ledger_repository import LedgerState
from billing.domain.service.record_normalizer import normalize_transaction
from tests.fakes import BrokenLedgerRepository, FakeLedgerRepository


def _setup(
    state: LedgerState | None = None,
) -> tuple[BillingSession, FakeLedgerRepository]:
    """Build a session over a fake repo, optionally pre-loaded with state."""
    repo = FakeLedgerRepository(state)
    return BillingSession.open(default_menu(), repo), repo


class TestBuildingABill:

    def test_add_item_returns_formatted_order(self):
        session, _ = _setup()
        dto = session.add_item("dosa", 2)
        assert dto.sequence_number == 1
        assert dto.subtotal == "₹50.00"
        assert dto.tax == "₹2.50"
        assert dto.grand_total == "₹52.50"
        assert dto.item_count == 2
        assert dto.items[0].line_total == "₹50.00"

    def test_remove_item(self):
        session, _ = _setup()
        session.add_item("dosa", 1)
        session.add_item("tea", 1)
        dto = session.remove_item(0)
        assert [item.item_id for item in dto.items] == ["tea"]
        assert dto.grand_total == "₹21.00"

    def test_errors_propagate(self):
        session, _ = _setup()
        with pytest.raises(InvalidQuantity):
            session.add_item("dosa", 0)
        with pytest.raises(UnknownItem):
            session.add_item("biryani", 1)
        with pytest.raises(IndexOutOfRange):
            session.remove_item(0)

    def test_nothing_saved_while_building(self):
        session, repo = _setup()
        session.add_item("dosa", 1)
        assert repo.save_count == 0


class TestClearOrder:

    def test_clear_without_confirmation(self):
        session, _ = _setup()
        session.add_item("dosa", 1)
        assert session.clear_order() is True
        assert session.current_order().items == []

    def test_declined_confirmation_keeps_bill(self):
        session, _ = _setup()
        session.add_item("dosa", 1)
        prompts = []

        def decline(prompt: str) -> bool:
            prompts.append(prompt)
            return False

        assert session.clear_order(confirm=decline) is False
        assert len(session.current_order().items) == 1
        assert prompts == [CLEAR_PROMPT]

    def test_empty_bill_not_confirmed(self):
        session, _ = _setup()
        asked = []
        assert session.clear_order(confirm=lambda p: asked.append(p) or False) is True
        assert asked == []


class TestFinalize:

    def test_finalize_appends_and_saves(self):
        session, repo = _setup()
        session.add_item("dosa", 2)
        dto = session.finalize("table 4")

        assert dto.index == 0
        assert dto.sequence_number == 1
        assert dto.grand_total == "₹52.50"
        assert dto.note == "table 4"
        assert repo.save_count == 1
        assert len(repo.state.transactions) == 1
        assert repo.state.next_sequence_number == 2
        assert repo.state.rollup.total_revenue == Money.of("52.50")

    def test_next_bill_is_empty_with_next_number(self):
        session, _ = _setup()
        session.add_item("dosa", 2)
        session.finalize()
        order = session.current_order()
        assert order.items == []
        assert order.sequence_number == 2

    def test_two_bills_roll_up(self):
        session, _ = _setup()
        session.add_item("dosa", 2)
        session.finalize()
        session.add_item("idli", 3)
        session.add_item("dosa", 1)
        session.finalize()

        summary = session.sales_summary()
        # 52.50 + (18 + 25) * 1.05 = 52.50 + 45.15
        assert summary.total_revenue == "₹97.65"
        assert summary.total_bills == 2
        quantities = {item.item_id: item.quantity for item in summary.items}
        assert quantities["dosa"] == 3
        assert quantities["idli"] == 3
        assert quantities["coffee"] == 0

    def test_empty_bill_rejected_without_side_effects(self):
        session, repo = _setup()
        with pytest.raises(EmptyOrder):
            session.finalize()
        assert session.transactions() == []
        assert session.sales_summary().total_revenue == "₹0.00"
        assert repo.save_count == 0

    def test_bill_kept_open_when_ledger_rejects_it(self, monkeypatch):
        session, repo = _setup()
        session.add_item("dosa", 2)

        def reject(transaction):
            raise ValueError("ledger unavailable")

        monkeypatch.setattr(session._ledger, "append", reject)
        with pytest.raises(ValueError):
            session.finalize()

        order = session.current_order()
        assert order.sequence_number == 1
        assert [(i.item_id, i.quantity) for i in order.items] == [("dosa", 2)]
        assert session.transactions() == []
        assert repo.save_count == 0


class TestOpen:

    def test_resumes_stored_state(self):
        stored = normalize_transaction(
            {"billNumber": 7, "items": [{"id": "tea", "name": "Tea", "price": 20, "quantity": 2}]}
        )
        state = LedgerState(
            transactions=[stored],
            rollup=DailyRollup(Money.of("42.00"), {"tea": 2}),
            next_sequence_number=8,
        )
        session, _ = _setup(state)

        assert session.current_order().sequence_number == 8
        assert session.transaction(0).sequence_number == 7
        assert session.sales_summary().total_revenue == "₹42.00"

    def test_transaction_out_of_range(self):
        session, _ = _setup()
        with pytest.raises(IndexOutOfRange):
            session.transaction(0)


class TestReset:

    def _with_one_bill(self):
        session, repo = _setup()
        session.add_item("dosa", 2)
        session.finalize()
        return session, repo

    def test_reset_clears_everything_and_saves(self):
        session, repo = self._with_one_bill()
        session.add_item("tea", 1)

        assert session.reset() is True
        assert session.transactions() == []
        assert session.current_order().items == []
        assert session.current_order().sequence_number == 1
        assert session.sales_summary().total_revenue == "₹0.00"
        assert repo.save_count == 2
        assert repo.state.transactions == []
        assert repo.state.next_sequence_number == 1

    def test_declined_reset_changes_nothing(self):
        session, repo = self._with_one_bill()
        prompts = []
        assert session.reset(confirm=lambda p: prompts.append(p) or False) is False
        assert prompts == [RESET_PROMPT]
        assert len(session.transactions()) == 1
        assert repo.save_count == 1

    def test_nothing_to_reset(self):
        session, repo = _setup()
        assert session.reset(confirm=lambda p: True) is False
        assert repo.save_count == 0

    def test_reset_then_finalize_matches_fresh_session(self):
        session, _ = self._with_one_bill()
        session.reset()
        session.add_item("tea", 1)
        session.finalize()

        fresh, _ = _setup()
        fresh.add_item("tea", 1)
        fresh.finalize()

        assert session.sales_summary() == fresh.sales_summary()


class TestPersistenceFailure:

    def test_failed_save_degrades_to_memory(self, caplog):
        repo = BrokenLedgerRepository()
        session = BillingSession.open(default_menu(), repo)
        session.add_item("dosa", 1)

        with caplog.at_level(logging.WARNING, logger="billing"):
            dto = session.finalize()

        assert dto.sequence_number == 1
        assert session.persistence_enabled is False
        assert len(session.transactions()) == 1
        assert "in memory only" in caplog.text

    def test_no_more_saves_after_failure(self):
        repo = BrokenLedgerRepository()
        session = BillingSession.open(default_menu(), repo)
        session.add_item("dosa", 1)
        session.finalize()
        session.add_item("tea", 1)
        session.finalize()
        assert repo.save_attempts == 1
        assert len(session.transactions()) == 2


class TestExport:

    def test_export_transaction(self):
        session, _ = _setup()
        session.add_item("dosa", 2)
        session.finalize("no onions")
        [table] = session.export_transaction(0)
        assert table.title == "Bill #1"
        assert table.rows == [("Dosa", 2, Money.of("25"), Money.of("50"))]
        assert table.note == "no onions"

    def test_export_current_order_requires_lines(self):
        session, _ = _setup()
        with pytest.raises(EmptyOrder):
            session.export_current_order()

    def test_export_sales_requires_bills(self):
        session, _ = _setup()
        with pytest.raises(EmptyLedger):
            session.export_sales()

    def test_export_sales(self):
        session, _ = _setup()
        session.add_item("dosa", 2)
        session.finalize()
        item_sales, bills = session.export_sales()
        assert item_sales.rows == [("Dosa", 2, Money.of("25"), Money.of("50"))]
        assert bills.rows[0][0] == "Bill #1"
        assert bills.rows[0][2] == Money.of("52.50")
