"""Core data models for Cart Recon."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .errors import ReconciliationMismatch, UnexpectedCartEntry


class ProductCategory(Enum):
    """Storefront categories. Values double as the category link names."""

    LAPTOPS = "LaptopsCategory"
    MICE = "MiceCategory"
    TABLETS = "TabletsCategory"
    HEADPHONES = "HeadphonesCategory"
    SPEAKERS = "SpeakersCategory"

    @property
    def label(self) -> str:
        """Short singular name, e.g. ``Laptop``."""
        return _CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, text: str) -> "ProductCategory":
        """Parse a link name or short label. Matching is case-sensitive."""
        for category in cls:
            if text == category.value or text == category.label:
                return category
        raise ValueError(f"Unknown category: {text!r}")


_CATEGORY_LABELS = {
    ProductCategory.LAPTOPS: "Laptop",
    ProductCategory.MICE: "Mouse",
    ProductCategory.TABLETS: "Tablet",
    ProductCategory.HEADPHONES: "Headphones",
    ProductCategory.SPEAKERS: "Speaker",
}


@dataclass(frozen=True, eq=False)
class AggregateKey:
    """(model, color) pair identifying one cart line.

    Equality and hashing ignore case and surrounding whitespace; the original
    spelling is kept for display.
    """

    model: str
    color: str

    @property
    def folded(self) -> tuple[str, str]:
        return (self.model.strip().casefold(), self.color.strip().casefold())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregateKey):
            return NotImplemented
        return self.folded == other.folded

    def __hash__(self) -> int:
        return hash(self.folded)

    def __str__(self) -> str:
        return f"{self.model} ({self.color})"


@dataclass(frozen=True)
class PurchaseIntent:
    """One desired cart addition, read from a single input row."""

    category: ProductCategory
    model: str
    quantity: int
    color: str
    row_number: int = 0  # 1-based line in the source, 0 when built in code

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")

    @property
    def key(self) -> AggregateKey:
        return AggregateKey(self.model, self.color)


@dataclass(frozen=True)
class PricedIntent:
    """A purchase intent enriched with the unit price seen on the product page."""

    intent: PurchaseIntent
    unit_price: Decimal
    line_total: Decimal

    def __post_init__(self):
        expected = self.unit_price * self.intent.quantity
        if self.line_total != expected:
            raise ValueError(
                f"Line total {self.line_total} != {self.unit_price} x {self.intent.quantity}"
            )

    @classmethod
    def from_intent(cls, intent: PurchaseIntent, unit_price: Decimal) -> "PricedIntent":
        return cls(
            intent=intent,
            unit_price=unit_price,
            line_total=unit_price * intent.quantity,
        )

    @property
    def category(self) -> ProductCategory:
        return self.intent.category

    @property
    def model(self) -> str:
        return self.intent.model

    @property
    def color(self) -> str:
        return self.intent.color

    @property
    def quantity(self) -> int:
        return self.intent.quantity

    @property
    def key(self) -> AggregateKey:
        return self.intent.key


@dataclass(frozen=True)
class ExpectedGroup:
    """Expected state of one cart line, summed over every intent sharing its key."""

    key: AggregateKey
    total_quantity: int
    total_price: Decimal
    entries: tuple[PricedIntent, ...] = ()

    @property
    def category(self) -> ProductCategory | None:
        return self.entries[0].category if self.entries else None


@dataclass(frozen=True)
class ObservedCartRow:
    """A cart line as rendered by the storefront."""

    product_name: str
    color: str
    quantity: int
    line_total: Decimal

    @property
    def key(self) -> AggregateKey:
        return AggregateKey(self.product_name, self.color)


class Outcome(Enum):
    """Result of comparing one observed value against the expectation."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    UNMATCHED = "unmatched"


ROW_SCOPE = "row"
GRAND_TOTAL_SCOPE = "grand_total"


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of one cart row, or of the grand total check."""

    outcome: Outcome
    key: AggregateKey | None
    expected_quantity: int | None
    expected_price: Decimal | None
    observed_quantity: int | None
    observed_price: Decimal | None
    scope: str = ROW_SCOPE
    detail: str = ""

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.MATCHED

    def describe(self) -> str:
        """Human-readable diagnostic line."""
        if self.scope == GRAND_TOTAL_SCOPE:
            status = "ok" if self.passed else "mismatch"
            return (
                f"Cart total: expected {_money(self.expected_price)}, "
                f"got {_money(self.observed_price)} [{status}]"
            )

        observed = f"qty {self.observed_quantity}, {_money(self.observed_price)}"
        if self.observed_quantity is None:
            observed = "nothing"
        if self.outcome is Outcome.UNMATCHED:
            return f"{self.key}: {self.detail or 'no expected entry'}, got {observed}"

        expected = f"qty {self.expected_quantity}, {_money(self.expected_price)}"
        if self.outcome is Outcome.MISMATCHED:
            return f"{self.key}: expected {expected}, got {observed}"
        return f"{self.key}: {observed} [ok]"


@dataclass(frozen=True)
class ReconciliationReport:
    """Every row outcome plus the grand total outcome of one run."""

    rows: tuple[ReconciliationResult, ...]
    grand_total: ReconciliationResult
    priced_intents: tuple[PricedIntent, ...] = field(default=(), compare=False)

    @property
    def results(self) -> list[ReconciliationResult]:
        return [*self.rows, self.grand_total]

    @property
    def failures(self) -> list[ReconciliationResult]:
        return [r for r in self.results if not r.passed]

    @property
    def passed(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise the terminal error for this report, if any.

        An unexpected cart entry wins over value mismatches since it usually
        explains them.
        """
        for result in self.rows:
            if result.outcome is Outcome.UNMATCHED:
                raise UnexpectedCartEntry(result)

        failures = self.failures
        if failures:
            raise ReconciliationMismatch(failures)


def _money(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"
