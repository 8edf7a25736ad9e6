"""Shared fixtures: an in-memory storefront standing in for the browser."""

from decimal import Decimal

import pytest

from cart_recon.config import Config, ReportingConfig
from cart_recon.gateways.base import StorefrontGateway
from cart_recon.models import ObservedCartRow
from cart_recon.reporting import RecordingReporter


class FakeStorefront(StorefrontGateway):
    """Storefront that keeps its cart in memory.

    Prices come from ``catalog`` keyed by model name. ``fail_on`` makes the
    named gateway method raise, ``extra_total`` adds a fee to the grand total.
    """

    def __init__(self, catalog: dict[str, Decimal], fail_on: str | None = None):
        self.catalog = catalog
        self.fail_on = fail_on
        self.extra_total = Decimal("0")
        self.calls: list[tuple] = []
        self.cart: dict[tuple[str, str], ObservedCartRow] = {}
        self._category = None
        self._model = None
        self._color = None
        self._quantity = 1

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name == self.fail_on:
            raise TimeoutError(f"{name} timed out")

    def navigate_to_category(self, name: str) -> None:
        self._record("navigate_to_category", name)
        self._category = name
        self._model = self._color = None
        self._quantity = 1

    def select_product(self, name: str) -> None:
        self._record("select_product", name)
        if name not in self.catalog:
            raise LookupError(f"No product named {name}")
        self._model = name

    def select_color(self, name: str) -> None:
        self._record("select_color", name)
        self._color = name

    def get_displayed_unit_price(self) -> Decimal:
        self._record("get_displayed_unit_price")
        return self.catalog[self._model]

    def set_quantity(self, quantity: int) -> None:
        self._record("set_quantity", quantity)
        self._quantity = quantity

    def confirm_add_to_cart(self) -> None:
        self._record("confirm_add_to_cart")
        key = (self._model.casefold(), self._color.casefold())
        price = self.catalog[self._model] * self._quantity
        row = self.cart.get(key)
        if row is None:
            # The storefront shows model names upper-cased
            row = ObservedCartRow(self._model.upper(), self._color.upper(), 0, Decimal("0"))
        self.cart[key] = ObservedCartRow(
            row.product_name, row.color, row.quantity + self._quantity, row.line_total + price
        )

    def list_cart_rows(self) -> list[ObservedCartRow]:
        self._record("list_cart_rows")
        return list(self.cart.values())

    def get_grand_total(self) -> Decimal:
        self._record("get_grand_total")
        return sum((r.line_total for r in self.cart.values()), Decimal("0")) + self.extra_total


CATALOG = {
    "HP Chromebook 14 G1(ES)": Decimal("299.99"),
    "HP USB 3 Button Optical Mouse": Decimal("9.99"),
    "HP ElitePad 1000 G2 Tablet": Decimal("1009.00"),
}

ITEMS_CSV = """Category,Model,Quantity,Color
LaptopsCategory,HP Chromebook 14 G1(ES),1,GRAY
MiceCategory,HP USB 3 Button Optical Mouse,2,BLACK
LaptopsCategory,HP Chromebook 14 G1(ES),2,gray
TabletsCategory,HP ElitePad 1000 G2 Tablet,1,GRAY
"""


@pytest.fixture
def storefront():
    """Provide an empty in-memory storefront."""
    return FakeStorefront(dict(CATALOG))


@pytest.fixture
def reporter():
    """Provide a reporter that records events."""
    return RecordingReporter()


@pytest.fixture
def items_file(tmp_path):
    """Write the sample shopping list to disk."""
    path = tmp_path / "shopping_items.csv"
    path.write_text(ITEMS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, items_file):
    """Config pointing at the sample list, with file logging under tmp."""
    return Config(
        data={"items_file": items_file},
        reporting=ReportingConfig(log_dir=tmp_path / "Logs", console=False, file=False),
    )


@pytest.fixture
def storefront_factory():
    """Build storefronts with a custom catalog or failing step."""
    return FakeStorefront
