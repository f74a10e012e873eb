"""Shared terminal formatting for bills and sales."""

from __future__ import annotations

import click

from billing.application.dto import OrderDTO, SalesSummaryDTO, TransactionDTO


def _echo_items(items) -> None:
    click.echo(f"  {'#':>2} {'Item':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*50}")
    for position, item in enumerate(items):
        click.echo(
            f"  {position:>2} {item.name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*50}")


def _echo_totals(dto) -> None:
    click.echo(f"  {'Items':<30} {dto.item_count:>20}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>20}")
    click.echo(f"  {'Tax (5%)':<30} {dto.tax:>20}")
    click.echo(f"  {'Grand Total':<30} {dto.grand_total:>20}")


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Bill #{dto.sequence_number}  (in progress)")
    click.echo()
    if not dto.items:
        click.echo("  No items added yet")
        return
    _echo_items(dto.items)
    _echo_totals(dto)


def display_transaction(dto: TransactionDTO) -> None:
    click.echo(f"Bill #{dto.sequence_number}")
    click.echo(f"Date:  {dto.finalized_at}")
    click.echo()
    _echo_items(dto.items)
    _echo_totals(dto)
    if dto.note:
        click.echo()
        click.echo("Notes:")
        click.echo(f"  {dto.note}")


def display_transaction_list(transactions: list[TransactionDTO]) -> None:
    if not transactions:
        click.echo("No transactions yet")
        return
    click.echo(f"  {'Index':>5}  {'Bill':<8} {'Date':<22} {'Items':>5} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for txn in transactions:
        click.echo(
            f"  {txn.index:>5}  {'#' + str(txn.sequence_number):<8} "
            f"{txn.finalized_at:<22} {txn.item_count:>5} {txn.grand_total:>12}"
        )


def display_sales(dto: SalesSummaryDTO) -> None:
    click.echo(f"Total revenue: {dto.total_revenue}")
    click.echo(f"Total bills:   {dto.total_bills}")
    click.echo()
    click.echo(f"  {'Item':<20} {'Sold':>6}")
    click.echo(f"  {'-'*27}")
    for item in dto.items:
        click.echo(f"  {item.name:<20} {item.quantity:>6}")
