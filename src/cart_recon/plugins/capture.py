"""Pytest plugin to capture cart diagnostics on test failure."""

from datetime import datetime
from pathlib import Path

import pytest

from ..errors import CartReconError

FAILURE_DIR_NAME = "failures"
SNAPSHOT_FIXTURES = ["storefront", "gateway", "page"]


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Hook to execute after each test phase."""
    outcome = yield
    report = outcome.get_result()
    if call.when == "call" and report.failed and call.excinfo is not None:
        for path in capture_failure(item, call.excinfo.value):
            report.user_properties.append(("cart_recon_artifact", str(path)))


def capture_failure(item, error: BaseException) -> list[Path]:
    """Write failure artifacts for a test and return their paths."""
    try:
        base_dir = Path(item.fspath).parent
    except (AttributeError, TypeError):
        base_dir = Path.cwd()

    failure_dir = base_dir / FAILURE_DIR_NAME
    failure_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    clean_name = item.name.replace("::", "_").replace("/", "_")
    written = []

    html = _page_html(item)
    if html:
        path = failure_dir / f"{clean_name}_{timestamp}.html"
        path.write_text(html, encoding="utf-8")
        written.append(path)

    if isinstance(error, CartReconError):
        path = failure_dir / f"{clean_name}_{timestamp}.txt"
        path.write_text(f"{type(error).__name__}: {error}\n", encoding="utf-8")
        written.append(path)

    return written


def _page_html(item) -> str:
    """HTML of the first fixture that can produce a page snapshot."""
    funcargs = getattr(item, "funcargs", {})
    for name in SNAPSHOT_FIXTURES:
        source = funcargs.get(name)
        if source is None:
            continue
        # Storefront gateways expose snapshot(), Playwright pages content()
        for method in ("snapshot", "content"):
            getter = getattr(source, method, None)
            if callable(getter):
                try:
                    content = getter()
                except Exception:
                    continue  # page already closed
                if isinstance(content, str) and content:
                    return content
    return ""
