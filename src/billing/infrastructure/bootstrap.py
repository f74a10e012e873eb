"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from billing.application.billing_session import BillingSession
from billing.domain.model.menu import MenuCatalog, default_menu
from billing.infrastructure.config import Settings
from billing.infrastructure.persistence.json_ledger_repository import (
    JsonLedgerRepository,
)


def menu_catalog() -> MenuCatalog:
    return default_menu()


def ledger_repository(settings: Settings, catalog: MenuCatalog) -> JsonLedgerRepository:
    return JsonLedgerRepository(settings.ledger_path, catalog.ids())


def billing_session(settings: Settings) -> BillingSession:
    catalog = menu_catalog()
    return BillingSession.open(catalog, ledger_repository(settings, catalog))
