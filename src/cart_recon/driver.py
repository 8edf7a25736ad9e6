"""Cart action driver - replays purchase intents against a storefront."""

from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable

from .config import CartConfig
from .errors import CartActionError
from .gateways.base import StorefrontGateway
from .models import PricedIntent, PurchaseIntent
from .reporting.base import Level, NullReporter, Reporter

# Stage names, in the order they run for each intent
NAVIGATE = "navigate_to_category"
SELECT_PRODUCT = "select_product"
SELECT_COLOR = "select_color"
READ_PRICE = "read_price"
SET_QUANTITY = "set_quantity"
CONFIRM = "confirm_add_to_cart"

STAGES = (NAVIGATE, SELECT_PRODUCT, SELECT_COLOR, READ_PRICE, SET_QUANTITY, CONFIRM)


class CartActionDriver:
    """Add purchase intents to the cart one at a time.

    The unit price is read before the quantity is entered and the line total
    is computed here; a subtotal shown by the storefront is never used.
    """

    def __init__(
        self,
        gateway: StorefrontGateway,
        config: CartConfig | None = None,
        reporter: Reporter | None = None,
    ):
        self.gateway = gateway
        self.config = config or CartConfig()
        self.reporter = reporter or NullReporter()

    def add_to_cart(self, intent: PurchaseIntent) -> PricedIntent:
        """Run every stage for one intent and return it with its observed price."""
        self.reporter.event(
            "cart.adding",
            f"Adding {intent.category.value} product {intent.model} to cart...",
            row_number=intent.row_number,
        )

        self._step(intent, NAVIGATE, f"Clicking category: {intent.category.value}",
                   lambda: self.gateway.navigate_to_category(intent.category.value))
        self._step(intent, SELECT_PRODUCT, f"Selecting product: {intent.model}",
                   lambda: self.gateway.select_product(intent.model))
        self._step(intent, SELECT_COLOR, f"Selecting color: {intent.color}",
                   lambda: self.gateway.select_color(intent.color))
        unit_price = self._step(intent, READ_PRICE, "Reading product price",
                                self._read_unit_price)
        self._step(intent, SET_QUANTITY, f"Setting quantity to: {intent.quantity}",
                   lambda: self.gateway.set_quantity(intent.quantity))
        self._step(intent, CONFIRM, "Adding to cart...",
                   self.gateway.confirm_add_to_cart)

        priced = PricedIntent.from_intent(intent, unit_price)
        self.reporter.event(
            "cart.added",
            f"Added {intent.model} - Qty: {intent.quantity}, "
            f"Price: ${priced.unit_price}, Total: ${priced.line_total}",
            model=intent.model,
            color=intent.color,
            quantity=intent.quantity,
            unit_price=priced.unit_price,
            line_total=priced.line_total,
        )
        return priced

    def add_all(self, intents: Iterable[PurchaseIntent]) -> list[PricedIntent]:
        """Add intents in order. The first failure aborts the whole run."""
        priced: list[PricedIntent] = []
        for intent in intents:
            priced.append(self.add_to_cart(intent))
        return priced

    def _step(self, intent: PurchaseIntent, stage: str, message: str, action: Callable):
        self.reporter.event("cart.stage", f"  → {message}", level=Level.DEBUG, stage=stage)
        try:
            return action()
        except Exception as e:
            self.reporter.event(
                "cart.failed",
                f"Failed at {stage} for {intent.model} ({intent.color}): {e}",
                level=Level.ERROR,
                stage=stage,
                row_number=intent.row_number,
            )
            raise CartActionError(intent, stage, e) from e

    def _read_unit_price(self) -> Decimal:
        price = self.gateway.get_displayed_unit_price()
        if not isinstance(price, Decimal):
            try:
                price = Decimal(str(price))
            except InvalidOperation as e:
                raise ValueError(f"Displayed price is not a number: {price!r}") from e

        if not price.is_finite() or price < 0:
            raise ValueError(f"Displayed price is not a valid amount: {price}")
        if -price.as_tuple().exponent > self.config.price_places:
            raise ValueError(
                f"Displayed price {price} has more than {self.config.price_places} decimal places"
            )
        return price
