"""Error taxonomy for cart reconciliation runs."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import PurchaseIntent, ReconciliationResult


class CartReconError(Exception):
    """Base class for every terminal signal raised by the engine."""


class ConfigurationError(CartReconError):
    """Input data or configuration is missing or unusable.

    The test fixtures have to be fixed; retrying will not help.
    """


class CartActionError(CartReconError):
    """A storefront step failed while adding an intent to the cart."""

    def __init__(self, intent: "PurchaseIntent", stage: str, cause: BaseException):
        self.intent = intent
        self.stage = stage
        self.cause = cause
        super().__init__(
            f"Failed to add {intent.model} ({intent.color}) x{intent.quantity} "
            f"at stage '{stage}': {cause}"
        )


class ReconciliationMismatch(CartReconError):
    """Expected and observed cart state diverge."""

    def __init__(self, results: "list[ReconciliationResult]", message: str | None = None):
        self.results = list(results)
        if message is None:
            lines = [r.describe() for r in self.results]
            message = "Cart reconciliation failed:\n  " + "\n  ".join(lines)
        super().__init__(message)


class CartCountMismatch(ReconciliationMismatch):
    """The cart holds a different number of lines than distinct expected keys."""

    def __init__(self, expected_count: int, observed_count: int):
        self.expected_count = expected_count
        self.observed_count = observed_count
        super().__init__(
            [],
            f"Expected exactly {expected_count} products in the cart, "
            f"found {observed_count}",
        )


class UnexpectedCartEntry(ReconciliationMismatch):
    """An observed cart row has no matching expected group."""

    def __init__(self, result: "ReconciliationResult"):
        self.result = result
        super().__init__([result], f"Unexpected product in cart: {result.describe()}")
