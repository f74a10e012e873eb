from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click

from billing.infrastructure.cli.bill_commands import bill_create, bill_list, bill_show
from billing.infrastructure.cli.export_commands import export_bill, export_sales
from billing.infrastructure.cli.sales_commands import menu_list, sales_reset, sales_summary
from billing.infrastructure.cli.session_command import session_command
from billing.infrastructure.config import load_settings
from billing.infrastructure.log_setup import configure_logging


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="BILLING_CONFIG",
    default=None,
    help="TOML settings file.",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding ledger.json.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging verbosity.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    data_dir: Path | None,
    log_level: str | None,
) -> None:
    """Billing: food counter point of sale"""
    try:
        settings = load_settings(config_path)
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")

    overrides = {}
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if overrides:
        settings = replace(settings, **overrides)

    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.group()
def menu() -> None:
    """Show the menu."""


@cli.group()
def bill() -> None:
    """Create and view bills."""


@cli.group()
def sales() -> None:
    """Daily sales summary and reset."""


@cli.group()
def export() -> None:
    """Export bills and reports."""


# Register subcommands
menu.add_command(menu_list)
bill.add_command(bill_create)
bill.add_command(bill_list)
bill.add_command(bill_show)
sales.add_command(sales_summary)
sales.add_command(sales_reset)
export.add_command(export_bill)
export.add_command(export_sales)
cli.add_command(session_command)
