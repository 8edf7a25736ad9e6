"""Base storefront interface used by the cart action driver."""

from abc import ABC, abstractmethod
from decimal import Decimal

from ..models import ObservedCartRow


class StorefrontGateway(ABC):
    """Abstract boundary to the browser or HTTP mechanics of a storefront.

    Calls are made strictly one at a time; implementations own any waiting,
    timeouts and re-navigation needed to cope with flaky page state.
    """

    @abstractmethod
    def navigate_to_category(self, name: str) -> None:
        """Open the listing page for a category."""
        pass

    @abstractmethod
    def select_product(self, name: str) -> None:
        """Open the product page for a model in the current category."""
        pass

    @abstractmethod
    def select_color(self, name: str) -> None:
        """Pick a colour on the open product page."""
        pass

    @abstractmethod
    def get_displayed_unit_price(self) -> Decimal:
        """
        Read the per-unit price shown on the product page.

        Returns:
            The price before any quantity is applied
        """
        pass

    @abstractmethod
    def set_quantity(self, quantity: int) -> None:
        """Enter the quantity to add."""
        pass

    @abstractmethod
    def confirm_add_to_cart(self) -> None:
        """Submit the add-to-cart action."""
        pass

    @abstractmethod
    def list_cart_rows(self) -> list[ObservedCartRow]:
        """
        Scrape every line currently rendered in the cart.

        Returns:
            List of ObservedCartRow objects in display order
        """
        pass

    @abstractmethod
    def get_grand_total(self) -> Decimal:
        """Read the cart summary total."""
        pass
