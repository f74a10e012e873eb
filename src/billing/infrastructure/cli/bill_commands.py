"""CLI commands for building, finalizing and viewing bills."""

from __future__ import annotations

import click

from billing.application.dto import OrderItemSpec
from billing.domain.exceptions import DomainException
from billing.infrastructure.bootstrap import billing_session
from billing.infrastructure.cli.display import (
    display_transaction,
    display_transaction_list,
)
from billing.infrastructure.config import Settings
from billing.infrastructure.export.renderers import TextTableRenderer


def parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'dosa:2,tea:1' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'item:quantity'."
            )
        item_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        specs.append(OrderItemSpec(item_id=item_id.strip().lower(), quantity=qty))
    if not specs:
        raise click.BadParameter("At least one item is required.")
    return specs


def warn_if_unsaved(session) -> None:
    if not session.persistence_enabled:
        click.echo("Warning: billing data could not be saved; see log.", err=True)


@click.command("create")
@click.option("--items", required=True, help="Items as 'item:qty,item:qty'.")
@click.option("--note", default="", help="Note printed on the bill.")
@click.option("--dry-run", is_flag=True, default=False, help="Preview without saving.")
@click.pass_obj
def bill_create(settings: Settings, items: str, note: str, dry_run: bool) -> None:
    """Ring up a bill and finalize it."""
    specs = parse_items(items)
    session = billing_session(settings)

    try:
        for spec in specs:
            session.add_item(spec.item_id, spec.quantity)
        if dry_run:
            renderer = TextTableRenderer(header=settings.shop_name, footer=settings.footer)
            click.echo(renderer.render(session.export_current_order(note)), nl=False)
            return
        dto = session.finalize(note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bill #{dto.sequence_number} saved.")
    click.echo()
    display_transaction(dto)
    warn_if_unsaved(session)


@click.command("list")
@click.pass_obj
def bill_list(settings: Settings) -> None:
    """List finalized bills."""
    session = billing_session(settings)
    display_transaction_list(session.transactions())


@click.command("show")
@click.argument("index", type=int)
@click.pass_obj
def bill_show(settings: Settings, index: int) -> None:
    """Show the finalized bill at INDEX (see 'bill list')."""
    session = billing_session(settings)

    try:
        dto = session.transaction(index)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_transaction(dto)
