"""Tests for the failure capture pytest plugin."""

from decimal import Decimal
from unittest.mock import MagicMock

from cart_recon.errors import CartCountMismatch
from cart_recon.plugins.capture import capture_failure


class MockItem:
    """Minimal stand-in for a pytest item."""

    def __init__(self, test_file, funcargs=None):
        self.fspath = test_file
        self.name = "test_cart[chromium]"
        self.funcargs = funcargs or {}


class TestCaptureFailure:
    def test_writes_snapshot_and_diagnostics(self, tmp_path):
        gateway = MagicMock()
        gateway.snapshot.return_value = "<div id='shoppingCart'></div>"
        item = MockItem(tmp_path / "test_cart.py", {"storefront": gateway})

        paths = capture_failure(item, CartCountMismatch(3, 2))

        html, text = paths
        assert html.parent == tmp_path / "failures"
        assert html.read_text() == "<div id='shoppingCart'></div>"
        assert "CartCountMismatch: Expected exactly 3 products" in text.read_text()

    def test_falls_back_to_page_content(self, tmp_path):
        page = MagicMock(spec=["content"])
        page.content.return_value = "<html>cart</html>"
        item = MockItem(tmp_path / "test_cart.py", {"page": page})

        [html] = capture_failure(item, AssertionError("boom"))

        assert html.suffix == ".html"
        assert "cart" in html.read_text()

    def test_closed_page_is_ignored(self, tmp_path):
        page = MagicMock(spec=["content"])
        page.content.side_effect = RuntimeError("Target closed")
        item = MockItem(tmp_path / "test_cart.py", {"page": page})

        assert capture_failure(item, AssertionError("boom")) == []

    def test_no_fixtures_no_plain_errors(self, tmp_path):
        item = MockItem(tmp_path / "test_cart.py", {"price": Decimal("1")})
        assert capture_failure(item, ValueError("x")) == []
