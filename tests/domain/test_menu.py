"""Unit tests for the menu catalog."""

import pytest

from billing.domain.exceptions import UnknownItem, ValidationError
from billing.domain.model.menu import MenuCatalog, MenuItem, default_menu
from billing.domain.model.value_objects import Money


class TestDefaultMenu:

    def test_has_the_counter_items_in_order(self):
        assert default_menu().ids() == [
            "idli", "dosa", "vada", "poori", "pongal", "tea", "coffee",
        ]

    def test_prices(self):
        menu = default_menu()
        assert menu.require("dosa").unit_price == Money.of("25")
        assert menu.require("coffee").unit_price == Money.of("35")
        assert menu.require("idli").name == "Idli"


class TestMenuCatalog:

    def test_get_unknown_returns_none(self):
        assert default_menu().get("biryani") is None

    def test_require_unknown_raises(self):
        with pytest.raises(UnknownItem, match="biryani"):
            default_menu().require("biryani")

    def test_contains_and_len(self):
        menu = default_menu()
        assert "tea" in menu
        assert "biryani" not in menu
        assert len(menu) == 7

    def test_duplicate_ids_rejected(self):
        item = MenuItem("tea", "Tea", Money.of("20"))
        with pytest.raises(ValidationError, match="Duplicate"):
            MenuCatalog([item, item])


class TestMenuItem:

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            MenuItem("tea", "Tea", Money.of("0"))

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="needs a name"):
            MenuItem("tea", "  ", Money.of("20"))

    def test_is_immutable(self):
        item = MenuItem("tea", "Tea", Money.of("20"))
        with pytest.raises(AttributeError):
            item.name = "Chai"  # type: ignore[misc]
