"""The fixed list of dishes the counter sells, as a menu catalog.

The catalog is built once at startup and never mutated.  Orders look
items up here and copy the name and price into their own line items.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from billing.domain.exceptions import UnknownItem, ValidationError
from billing.domain.model.value_objects import Money


@dataclass(frozen=True)
class MenuItem:
    """A dish on the menu with its unit price."""

    id: str
    name: str
    unit_price: Money

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Menu item id is required")
        if not self.name or not self.name.strip():
            raise ValidationError(f"Menu item '{self.id}' needs a name")
        if self.unit_price.amount <= 0:
            raise ValidationError(
                f"Menu item '{self.id}' price must be greater than zero"
            )


class MenuCatalog:
    """Ordered, read-only mapping of item id to MenuItem."""

    def __init__(self, items: Iterable[MenuItem]) -> None:
        self._items: dict[str, MenuItem] = {}
        for item in items:
            if item.id in self._items:
                raise ValidationError(f"Duplicate menu item id '{item.id}'")
            self._items[item.id] = item

    def get(self, item_id: str) -> MenuItem | None:
        return self._items.get(item_id)

    def require(self, item_id: str) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise UnknownItem(f"Item '{item_id}' is not on the menu")
        return item

    def ids(self) -> list[str]:
        return list(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)


def default_menu() -> MenuCatalog:
    """The counter's standard menu."""
    return MenuCatalog(
        [
            MenuItem("idli", "Idli", Money.of("6")),
            MenuItem("dosa", "Dosa", Money.of("25")),
            MenuItem("vada", "Vada", Money.of("7")),
            MenuItem("poori", "Poori", Money.of("60")),
            MenuItem("pongal", "Pongal", Money.of("80")),
            MenuItem("tea", "Tea", Money.of("20")),
            MenuItem("coffee", "Coffee", Money.of("35")),
        ]
    )
