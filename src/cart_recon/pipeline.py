"""Single-pass reconciliation run: load, drive, aggregate, reconcile."""

from pathlib import Path
from typing import TextIO

from .aggregator import aggregate, expected_grand_total
from .config import Config
from .driver import CartActionDriver
from .gateways.base import StorefrontGateway
from .loader import PurchaseIntentLoader
from .models import ReconciliationReport
from .reconciler import build_report
from .reporting.base import Level, NullReporter, Reporter


def run_reconciliation(
    gateway: StorefrontGateway,
    config: Config,
    source: str | Path | TextIO | None = None,
    reporter: Reporter | None = None,
) -> ReconciliationReport:
    """
    Run the whole pipeline once against an open storefront session.

    Loader and driver errors propagate unchanged and abort the run. Value
    mismatches are returned in the report; call ``raise_for_failures`` on it
    to turn them into an exception.

    Raises:
        ConfigurationError: no usable purchase intents
        CartActionError: a storefront step failed
        CartCountMismatch: the cart holds the wrong number of lines
    """
    reporter = reporter or NullReporter()
    places = config.cart.price_places

    loader = PurchaseIntentLoader(config.data, reporter)
    intents = loader.load(source)

    driver = CartActionDriver(gateway, config.cart, reporter)
    priced = driver.add_all(intents)

    expected = aggregate(priced)
    reporter.event(
        "cart.expected",
        f"Expecting {len(expected)} cart lines from {len(priced)} entries, "
        f"total ${expected_grand_total(expected)}",
        lines=len(expected),
        entries=len(priced),
    )

    reporter.event("cart.validating", "Start shopping cart and price validation")
    observed = gateway.list_cart_rows()
    reporter.event("cart.observed", f"Found {len(observed)} products in shopping cart", rows=len(observed))
    grand_total = gateway.get_grand_total()

    report = build_report(expected, observed, grand_total, priced, places)
    for result in report.results:
        if result.passed:
            reporter.event("result.matched", result.describe(), scope=result.scope)
        else:
            reporter.event(
                f"result.{result.outcome.value}",
                result.describe(),
                level=Level.ERROR,
                scope=result.scope,
            )

    if report.passed:
        reporter.event("run.passed", "Cart validation passed")
    else:
        reporter.event(
            "run.failed",
            f"Cart validation failed with {len(report.failures)} problem(s)",
            level=Level.ERROR,
        )
    return report
