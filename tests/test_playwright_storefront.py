"""Tests for the Playwright storefront gateway, with a mocked page."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from cart_recon.analyzer.cart_parser import PriceFormatError
from cart_recon.config import StorefrontConfig
from cart_recon.gateways.playwright_storefront import (
    PRICE_SELECTOR,
    QUANTITY_INPUT_SELECTOR,
    PlaywrightStorefront,
)

from .test_cart_parser import CART_HTML


@pytest.fixture
def page():
    """Provide mock Playwright page."""
    return MagicMock()


@pytest.fixture
def gateway(page):
    return PlaywrightStorefront(page, StorefrontConfig(base_url="https://shop.test/", navigation_retries=1))


class TestProductActions:
    def test_navigate_starts_from_home(self, gateway, page):
        gateway.navigate_to_category("LaptopsCategory")

        page.goto.assert_called_once_with("https://shop.test/")
        page.get_by_role.assert_called_once_with("link", name="LaptopsCategory", exact=True)
        page.get_by_role.return_value.click.assert_called_once()

    def test_navigation_timeout_propagates(self, gateway, page):
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")

        with pytest.raises(PlaywrightTimeoutError):
            gateway.navigate_to_category("MiceCategory")
        assert page.goto.call_count == 1

    def test_navigation_retried_on_timeout(self, page):
        gateway = PlaywrightStorefront(page, StorefrontConfig(navigation_retries=2))
        page.goto.side_effect = [PlaywrightTimeoutError("slow"), None]

        gateway.navigate_to_category("MiceCategory")

        assert page.goto.call_count == 2

    def test_select_product_and_color(self, gateway, page):
        gateway.select_product("HP ROAR PLUS")
        gateway.select_color("BLUE")

        page.get_by_text.assert_called_once_with("HP ROAR PLUS")
        page.get_by_title.assert_called_once_with("BLUE")

    def test_unit_price(self, gateway, page):
        page.locator.return_value.inner_text.return_value = "$1,009.00"

        assert gateway.get_displayed_unit_price() == Decimal("1009.00")
        page.locator.assert_called_with(PRICE_SELECTOR)

    def test_bad_price_text(self, gateway, page):
        page.locator.return_value.inner_text.return_value = "SOLD OUT"

        with pytest.raises(PriceFormatError):
            gateway.get_displayed_unit_price()

    def test_quantity_and_confirm(self, gateway, page):
        gateway.set_quantity(3)
        gateway.confirm_add_to_cart()

        page.locator.assert_called_with(QUANTITY_INPUT_SELECTOR)
        page.locator.return_value.fill.assert_called_once_with("3")
        page.get_by_role.assert_called_with("button", name="ADD TO CART")


class TestCartInspection:
    def test_cart_is_opened_once(self, gateway, page):
        page.locator.return_value.evaluate.return_value = CART_HTML

        rows = gateway.list_cart_rows()
        total = gateway.get_grand_total()

        assert len(rows) == 3
        assert total == Decimal("1209.97")
        page.get_by_role.assert_called_once_with("link", name="ShoppingCart")

    def test_adding_invalidates_cached_cart(self, gateway, page):
        page.locator.return_value.evaluate.return_value = CART_HTML

        gateway.list_cart_rows()
        gateway.confirm_add_to_cart()
        gateway.list_cart_rows()

        assert page.locator.return_value.evaluate.call_count == 2

    def test_snapshot(self, gateway, page):
        page.content.return_value = "<html></html>"
        assert gateway.snapshot() == "<html></html>"
