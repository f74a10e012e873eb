"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money values are
already formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (menu item id + quantity)."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the operator."""

    item_id: str
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "₹25.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: the bill currently being built."""

    sequence_number: int
    items: list[LineItemDTO]
    item_count: int
    subtotal: str
    tax: str
    grand_total: str
    created_at: str


@dataclass(frozen=True)
class TransactionDTO:
    """Output: a finalized bill."""

    index: int
    sequence_number: int
    items: list[LineItemDTO]
    item_count: int
    subtotal: str
    tax: str
    grand_total: str
    note: str
    finalized_at: str


@dataclass(frozen=True)
class ItemSalesDTO:
    item_id: str
    name: str
    quantity: int


@dataclass(frozen=True)
class SalesSummaryDTO:
    """Output: the running daily rollup."""

    total_revenue: str
    total_bills: int
    items: list[ItemSalesDTO]
