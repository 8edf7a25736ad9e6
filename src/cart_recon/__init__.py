"""Cart Recon - CSV-driven shopping cart reconciliation for storefront tests."""

from .aggregator import aggregate
from .driver import CartActionDriver
from .errors import (
    CartActionError,
    CartCountMismatch,
    CartReconError,
    ConfigurationError,
    ReconciliationMismatch,
    UnexpectedCartEntry,
)
from .loader import PurchaseIntentLoader
from .reconciler import reconcile, reconcile_total

__version__ = "0.1.0"

__all__ = [
    "CartActionDriver",
    "CartActionError",
    "CartCountMismatch",
    "CartReconError",
    "ConfigurationError",
    "PurchaseIntentLoader",
    "ReconciliationMismatch",
    "UnexpectedCartEntry",
    "aggregate",
    "reconcile",
    "reconcile_total",
]
