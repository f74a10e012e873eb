"""CLI commands for the menu and the daily sales rollup."""

from __future__ import annotations

import click

from billing.infrastructure.bootstrap import billing_session, menu_catalog
from billing.infrastructure.cli.bill_commands import warn_if_unsaved
from billing.infrastructure.cli.display import display_sales
from billing.infrastructure.config import Settings


@click.command("list")
def menu_list() -> None:
    """List menu items and prices."""
    click.echo(f"  {'ID':<10} {'Item':<20} {'Price':>10}")
    click.echo(f"  {'-'*42}")
    for item in menu_catalog():
        click.echo(f"  {item.id:<10} {item.name:<20} {str(item.unit_price):>10}")


@click.command("summary")
@click.pass_obj
def sales_summary(settings: Settings) -> None:
    """Show total revenue and item-wise quantities."""
    session = billing_session(settings)
    display_sales(session.sales_summary())


@click.command("reset")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_obj
def sales_reset(settings: Settings, yes: bool) -> None:
    """Clear all bills and the sales rollup."""
    session = billing_session(settings)
    confirm = (lambda _prompt: True) if yes else click.confirm

    if not session.reset(confirm=confirm):
        click.echo("Nothing reset.")
        return

    click.echo("All billing data reset.")
    warn_if_unsaved(session)
