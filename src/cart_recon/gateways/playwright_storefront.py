"""Playwright gateway for the Advantage Online Shopping demo site."""

import re
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from playwright.sync_api import Page, expect, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..analyzer.cart_parser import CART_SELECTOR, parse_cart_rows, parse_grand_total, parse_price
from ..config import StorefrontConfig
from ..models import ObservedCartRow
from .base import StorefrontGateway

PRICE_SELECTOR = "#Description > h2"
QUANTITY_INPUT_SELECTOR = 'input[name="quantity"]'


class PlaywrightStorefront(StorefrontGateway):
    """Drive the storefront through a Playwright page."""

    def __init__(self, page: Page, config: StorefrontConfig):
        self.page = page
        self.config = config
        self._cart_html: str | None = None

        # Bind the retry policy per instance so the attempt count follows config
        self._goto_category = retry(
            stop=stop_after_attempt(max(1, config.navigation_retries)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(PlaywrightTimeoutError),
            reraise=True,
        )(self._goto_category)

    @classmethod
    @contextmanager
    def launch(cls, config: StorefrontConfig) -> Iterator["PlaywrightStorefront"]:
        """Open a browser session for the run and close it afterwards."""
        with sync_playwright() as p:
            browser_type = getattr(p, config.browser)
            browser = browser_type.launch(
                headless=config.launch.headless,
                args=config.launch.args,
                slow_mo=config.launch.slow_mo,
            )
            try:
                context = browser.new_context(no_viewport=True)
                context.set_default_timeout(config.default_timeout)
                page = context.new_page()
                try:
                    yield cls(page, config)
                finally:
                    page.close()
                    context.close()
            finally:
                browser.close()

    def open_home(self) -> None:
        """Load the home page and check its title."""
        self.page.goto(self.config.base_url)
        expect(self.page).to_have_title(re.compile(self.config.title_pattern))

    def snapshot(self) -> str:
        """Current page HTML, for failure artifacts."""
        return self.page.content()

    # ── StorefrontGateway ────────────────────────────────────────────────────

    def navigate_to_category(self, name: str) -> None:
        self._goto_category(name)

    def select_product(self, name: str) -> None:
        self.page.get_by_text(name).click()

    def select_color(self, name: str) -> None:
        self.page.get_by_title(name).click()

    def get_displayed_unit_price(self) -> Decimal:
        return parse_price(self.page.locator(PRICE_SELECTOR).inner_text())

    def set_quantity(self, quantity: int) -> None:
        self.page.locator(QUANTITY_INPUT_SELECTOR).fill(str(quantity))

    def confirm_add_to_cart(self) -> None:
        self.page.get_by_role("button", name="ADD TO CART").click()
        self._cart_html = None

    def list_cart_rows(self) -> list[ObservedCartRow]:
        return parse_cart_rows(self._load_cart())

    def get_grand_total(self) -> Decimal:
        return parse_grand_total(self._load_cart())

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _goto_category(self, name: str) -> None:
        # Start from the home page each time so the category links are present
        self.page.goto(self.config.base_url)
        self.page.get_by_role("link", name=name, exact=True).click()

    def _load_cart(self) -> str:
        """Open the cart once and cache its markup until the cart changes."""
        if self._cart_html is None:
            self.page.get_by_role("link", name="ShoppingCart").click()
            cart = self.page.locator(CART_SELECTOR)
            cart.wait_for()
            self._cart_html = cart.evaluate("el => el.outerHTML")
        return self._cart_html
