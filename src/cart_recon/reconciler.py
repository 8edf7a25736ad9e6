"""Cart reconciler - compares the expected cart against what the storefront shows."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from .aggregator import expected_grand_total
from .errors import CartCountMismatch
from .models import (
    GRAND_TOTAL_SCOPE,
    AggregateKey,
    ExpectedGroup,
    ObservedCartRow,
    Outcome,
    PricedIntent,
    ReconciliationReport,
    ReconciliationResult,
)


def round_currency(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def reconcile(
    expected: Mapping[AggregateKey, ExpectedGroup],
    observed: Sequence[ObservedCartRow],
    places: int = 2,
) -> list[ReconciliationResult]:
    """
    Match every observed cart row to its expected group.

    Several intents sharing a key collapse into a single cart line, so the
    cart must hold exactly one row per distinct key. A second row for a key
    that was already matched is reported as a duplicate, and every expected
    key left without a row is reported as missing.

    Raises:
        CartCountMismatch: row count differs from the number of expected keys
    """
    if len(observed) != len(expected):
        raise CartCountMismatch(len(expected), len(observed))

    results = []
    seen: set[AggregateKey] = set()
    for row in observed:
        if row.key in seen:
            results.append(_duplicate_row(row, places))
            continue
        seen.add(row.key)
        results.append(_reconcile_row(expected, row, places))

    results.extend(
        _missing_row(group, places) for key, group in expected.items() if key not in seen
    )
    return results


def reconcile_total(
    expected: Mapping[AggregateKey, ExpectedGroup],
    observed_grand_total: Decimal,
    places: int = 2,
) -> ReconciliationResult:
    """Compare the summed expected prices with the cart summary total."""
    expected_total = round_currency(expected_grand_total(expected), places)
    observed_total = round_currency(observed_grand_total, places)
    return ReconciliationResult(
        outcome=Outcome.MATCHED if expected_total == observed_total else Outcome.MISMATCHED,
        key=None,
        expected_quantity=sum(g.total_quantity for g in expected.values()),
        expected_price=expected_total,
        observed_quantity=None,
        observed_price=observed_total,
        scope=GRAND_TOTAL_SCOPE,
    )


def build_report(
    expected: Mapping[AggregateKey, ExpectedGroup],
    observed_rows: Sequence[ObservedCartRow],
    observed_grand_total: Decimal,
    priced_intents: Sequence[PricedIntent] = (),
    places: int = 2,
) -> ReconciliationReport:
    """Run both checks and bundle the outcomes."""
    return ReconciliationReport(
        rows=tuple(reconcile(expected, observed_rows, places)),
        grand_total=reconcile_total(expected, observed_grand_total, places),
        priced_intents=tuple(priced_intents),
    )


def _reconcile_row(
    expected: Mapping[AggregateKey, ExpectedGroup],
    row: ObservedCartRow,
    places: int,
) -> ReconciliationResult:
    observed_price = round_currency(row.line_total, places)
    group = expected.get(row.key)
    if group is None:
        return ReconciliationResult(
            outcome=Outcome.UNMATCHED,
            key=row.key,
            expected_quantity=None,
            expected_price=None,
            observed_quantity=row.quantity,
            observed_price=observed_price,
        )

    expected_price = round_currency(group.total_price, places)
    matched = row.quantity == group.total_quantity and observed_price == expected_price
    return ReconciliationResult(
        outcome=Outcome.MATCHED if matched else Outcome.MISMATCHED,
        key=row.key,
        expected_quantity=group.total_quantity,
        expected_price=expected_price,
        observed_quantity=row.quantity,
        observed_price=observed_price,
    )


def _duplicate_row(row: ObservedCartRow, places: int) -> ReconciliationResult:
    return ReconciliationResult(
        outcome=Outcome.UNMATCHED,
        key=row.key,
        expected_quantity=None,
        expected_price=None,
        observed_quantity=row.quantity,
        observed_price=round_currency(row.line_total, places),
        detail="duplicate cart line",
    )


def _missing_row(group: ExpectedGroup, places: int) -> ReconciliationResult:
    return ReconciliationResult(
        outcome=Outcome.MISMATCHED,
        key=group.key,
        expected_quantity=group.total_quantity,
        expected_price=round_currency(group.total_price, places),
        observed_quantity=None,
        observed_price=None,
        detail="missing from cart",
    )
