"""Cart aggregator - groups priced intents into expected cart lines."""

from decimal import Decimal
from typing import Iterable, Mapping

from .models import AggregateKey, ExpectedGroup, PricedIntent


def aggregate(priced_intents: Iterable[PricedIntent]) -> dict[AggregateKey, ExpectedGroup]:
    """
    Group priced intents by case-insensitive (model, color).

    Quantities and line totals are summed exactly; unit prices may differ
    between entries of a group. No rounding happens here.

    Returns:
        Mapping of key to its expected cart line, in first-seen order
    """
    buckets: dict[AggregateKey, list[PricedIntent]] = {}
    for priced in priced_intents:
        buckets.setdefault(priced.key, []).append(priced)

    groups = {}
    for key, entries in buckets.items():
        groups[key] = ExpectedGroup(
            key=key,
            total_quantity=sum(p.quantity for p in entries),
            total_price=sum((p.line_total for p in entries), Decimal("0")),
            entries=tuple(entries),
        )
    return groups


def expected_grand_total(groups: Mapping[AggregateKey, ExpectedGroup]) -> Decimal:
    """Sum of every group's total price."""
    return sum((g.total_price for g in groups.values()), Decimal("0"))
