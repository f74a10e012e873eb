"""Interactive counter session.

Keeps one BillingSession alive across many operator commands, the way
the counter is used during a shift.
"""

from __future__ import annotations

import click

from billing.domain.exceptions import DomainException
from billing.infrastructure.bootstrap import billing_session
from billing.infrastructure.cli.bill_commands import warn_if_unsaved
from billing.infrastructure.cli.display import (
    display_order,
    display_sales,
    display_transaction,
    display_transaction_list,
)
from billing.infrastructure.config import Settings

HELP_TEXT = """\
Commands:
  add ITEM QTY     add QTY of a menu item to the bill
  remove N         remove line N from the bill
  show             show the current bill
  clear            clear the current bill
  save [NOTE]      finalize the bill with an optional note
  bills            list finalized bills
  view N           show finalized bill N
  sales            show the sales summary
  reset            clear all bills and sales
  help             show this help
  quit             leave the session"""


def _int_arg(args: list[str], position: int, name: str) -> int:
    try:
        return int(args[position])
    except (IndexError, ValueError):
        raise click.UsageError(f"{name} must be a whole number")


@click.command("session")
@click.pass_obj
def session_command(settings: Settings) -> None:
    """Run an interactive billing session."""
    session = billing_session(settings)
    click.echo(f"{settings.shop_name}: next bill #{session.current_order().sequence_number}")
    click.echo("Type 'help' for commands.")

    while True:
        try:
            line = click.prompt("billing", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            click.echo()
            break

        parts = line.split(maxsplit=1)
        if not parts:
            continue
        command = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        args = rest.split()

        try:
            if command in ("quit", "exit"):
                break
            elif command == "help":
                click.echo(HELP_TEXT)
            elif command == "add":
                if not args:
                    raise click.UsageError("usage: add ITEM QTY")
                display_order(session.add_item(args[0].lower(), _int_arg(args, 1, "QTY")))
            elif command == "remove":
                display_order(session.remove_item(_int_arg(args, 0, "N")))
            elif command == "show":
                display_order(session.current_order())
            elif command == "clear":
                if session.clear_order(confirm=click.confirm):
                    click.echo("Bill cleared.")
            elif command == "save":
                dto = session.finalize(rest)
                click.echo(f"Bill #{dto.sequence_number} saved.")
                display_transaction(dto)
                warn_if_unsaved(session)
            elif command == "bills":
                display_transaction_list(session.transactions())
            elif command == "view":
                display_transaction(session.transaction(_int_arg(args, 0, "N")))
            elif command == "sales":
                display_sales(session.sales_summary())
            elif command == "reset":
                if session.reset(confirm=click.confirm):
                    click.echo("All billing data reset.")
                    warn_if_unsaved(session)
                else:
                    click.echo("Nothing reset.")
            else:
                click.echo(f"Unknown command '{command}'. Type 'help' for commands.")
        except (DomainException, click.UsageError) as exc:
            click.echo(f"Error: {exc}", err=True)
