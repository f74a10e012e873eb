"""CLI commands that export bills and sales reports as text or CSV."""

from __future__ import annotations

import click

from billing.application.export import TableRenderer
from billing.domain.exceptions import DomainException
from billing.infrastructure.bootstrap import billing_session
from billing.infrastructure.config import Settings
from billing.infrastructure.export.renderers import CsvTableRenderer, TextTableRenderer

_format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "csv"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)
_output_option = click.option(
    "--output",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="File to write (default: stdout).",
)


def _renderer(fmt: str, settings: Settings) -> TableRenderer:
    if fmt.lower() == "csv":
        return CsvTableRenderer()
    return TextTableRenderer(header=settings.shop_name, footer=settings.footer)


@click.command("bill")
@click.argument("index", type=int)
@_format_option
@_output_option
@click.pass_obj
def export_bill(settings: Settings, index: int, fmt: str, output) -> None:
    """Export the finalized bill at INDEX."""
    session = billing_session(settings)

    try:
        tables = session.export_transaction(index)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    output.write(_renderer(fmt, settings).render(tables))


@click.command("sales")
@_format_option
@_output_option
@click.pass_obj
def export_sales(settings: Settings, fmt: str, output) -> None:
    """Export the daily revenue report."""
    session = billing_session(settings)

    try:
        tables = session.export_sales()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    output.write(_renderer(fmt, settings).render(tables))
