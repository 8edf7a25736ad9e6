"""Purchase intent loader - reads the shopping items CSV."""

import csv
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .config import DataConfig
from .errors import ConfigurationError
from .models import ProductCategory, PurchaseIntent
from .reporting.base import Level, NullReporter, Reporter

COLUMNS = ("Category", "Model", "Quantity", "Color")
QUANTITY_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class SkippedRow:
    """An input row that failed validation."""

    row_number: int
    reason: str
    raw: str


@dataclass
class LoadResult:
    """Valid intents in file order plus the rows that were skipped."""

    intents: list[PurchaseIntent] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)


class PurchaseIntentLoader:
    """Parse ``Category,Model,Quantity,Color`` rows into purchase intents.

    Validation is best effort: bad rows are reported and skipped so that
    hand-edited fixtures still load. Only an unreadable source or a source
    without a single valid row is fatal.
    """

    def __init__(self, config: DataConfig | None = None, reporter: Reporter | None = None):
        self.config = config or DataConfig()
        self.reporter = reporter or NullReporter()

    def load(self, source: str | Path | TextIO | None = None) -> list[PurchaseIntent]:
        """Load intents, raising ConfigurationError when none are usable."""
        return self.load_with_report(source).intents

    def load_with_report(self, source: str | Path | TextIO | None = None) -> LoadResult:
        """Load intents and keep the skipped rows for diagnostics."""
        if source is None:
            source = self.config.items_file

        lines = self._read_lines(source)
        numbered = [(n, line) for n, line in enumerate(lines, start=1) if line.strip()]
        if len(numbered) < 2:
            raise ConfigurationError(
                f"{_describe(source)} must contain a header and at least one product row"
            )

        result = LoadResult()
        # First non-empty line is the header; column names are not checked
        for row_number, line in numbered[1:]:
            intent, reason = self._parse_row(row_number, line)
            if intent is None:
                skipped = SkippedRow(row_number=row_number, reason=reason, raw=line.strip())
                result.skipped.append(skipped)
                self.reporter.event(
                    "intent.skipped",
                    f"Skipping row {row_number}: {reason}",
                    level=Level.WARNING,
                    row_number=row_number,
                    reason=reason,
                    raw=skipped.raw,
                )
                continue

            result.intents.append(intent)
            self.reporter.event(
                "intent.loaded",
                f"Loaded: {intent.category.value} - {intent.model} "
                f"(Qty: {intent.quantity}, Color: {intent.color})",
                level=Level.DEBUG,
                row_number=row_number,
            )

        self.reporter.event(
            "intents.loaded",
            f"Loaded {len(result.intents)} products from {_describe(source)} "
            f"({len(result.skipped)} skipped)",
            loaded=len(result.intents),
            skipped=len(result.skipped),
        )

        if not result.intents:
            raise ConfigurationError(f"No valid products loaded from {_describe(source)}")
        return result

    def _read_lines(self, source: str | Path | TextIO) -> list[str]:
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.is_file():
                raise ConfigurationError(f"CSV file not found: {path}")
            self.reporter.event("intents.reading", f"Reading shopping items from: {path}")
            try:
                return path.read_text(encoding=self.config.encoding).splitlines()
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigurationError(f"Cannot read {path}: {e}") from e
        return source.read().splitlines()

    def _parse_row(self, row_number: int, line: str) -> tuple[PurchaseIntent | None, str]:
        """Return the parsed intent, or None and the reason it was rejected."""
        fields = [f.strip() for f in next(csv.reader([line]))]
        if len(fields) < len(COLUMNS):
            return None, f"expected {len(COLUMNS)} fields, got {len(fields)}"

        category_text, model, quantity_text, color = fields[:4]

        try:
            category = ProductCategory.parse(category_text)
        except ValueError:
            return None, f"invalid category '{category_text}'"

        if not QUANTITY_PATTERN.fullmatch(quantity_text):
            return None, f"invalid quantity '{quantity_text}'"
        quantity = int(quantity_text)
        if quantity <= 0:
            return None, f"invalid quantity '{quantity_text}'"

        if not model:
            return None, "empty model"
        if not color:
            return None, "empty color"

        return PurchaseIntent(
            category=category,
            model=model,
            quantity=quantity,
            color=color,
            row_number=row_number,
        ), ""


def load_intents(source: str | Path | TextIO, reporter: Reporter | None = None) -> list[PurchaseIntent]:
    """Load intents with the default data config."""
    return PurchaseIntentLoader(reporter=reporter).load(source)


def _describe(source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", "<stream>")
